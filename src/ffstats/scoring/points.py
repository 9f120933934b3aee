"""Position-weighted points, keeper points and ghost points.

Every function here is pure and total: stat values are already coerced to
finite floats by the mapper, so nothing in this module raises.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from ffstats.models import GameweekStats, Position


@dataclass(frozen=True)
class HeadlineWeights:
    goal: float
    assist: float
    clean_sheet: float


@dataclass(frozen=True)
class OutfieldWeights:
    headline: HeadlineWeights
    aerial_won: float
    concede_penalty: bool


_OUTFIELD_WEIGHTS: Dict[Position, OutfieldWeights] = {
    Position.DEFENDER: OutfieldWeights(HeadlineWeights(10, 7, 6), aerial_won=1, concede_penalty=True),
    Position.MIDFIELDER: OutfieldWeights(HeadlineWeights(9, 6, 1), aerial_won=0.5, concede_penalty=False),
    Position.FORWARD: OutfieldWeights(HeadlineWeights(9, 6, 0), aerial_won=0.5, concede_penalty=False),
    Position.OTHER: OutfieldWeights(HeadlineWeights(9, 6, 0), aerial_won=0.5, concede_penalty=False),
    # Keepers uploaded through the outfield export are scored as non-defenders.
    Position.KEEPER: OutfieldWeights(HeadlineWeights(9, 6, 0), aerial_won=0.5, concede_penalty=False),
}

# Ghost points price keepers like defenders.
_GHOST_WEIGHTS: Dict[Position, HeadlineWeights] = {
    Position.KEEPER: HeadlineWeights(10, 7, 6),
    Position.DEFENDER: HeadlineWeights(10, 7, 6),
    Position.MIDFIELDER: HeadlineWeights(9, 6, 1),
    Position.FORWARD: HeadlineWeights(9, 6, 0),
    Position.OTHER: HeadlineWeights(9, 6, 0),
}

_OUTFIELD_FLAT: Tuple[Tuple[str, float], ...] = (
    ("key_passes", 2),
    ("shots_on_target", 2),
    ("tackles_won", 1),
    ("interceptions", 1),
    ("clearances", 0.25),
    ("dribbles_succeeded", 1),
    ("blocked_shots", 1),
    ("accurate_crosses", 1),
    ("penalties_drawn", 2),
    ("dispossessed", -0.5),
    ("yellow_cards", -2),
    ("red_cards", -7),
    ("penalties_missed", -4),
    ("own_goals", -5),
)

_KEEPER_FLAT: Tuple[Tuple[str, float], ...] = (
    ("clean_sheet", 6),
    ("saves", 2),
    ("penalty_saves", 8),
    ("high_claims", 1),
    ("smothers", 1),
    ("goals", 10),
    ("assists", 7),
    ("key_passes", 2),
    ("shots_on_target", 2),
    ("tackles_won", 1),
    ("interceptions", 1),
    ("clearances", 0.25),
    ("dribbles_succeeded", 1),
    ("aerials_won", 1),
    ("dispossessed", -0.5),
    ("yellow_cards", -2),
    ("red_cards", -7),
    ("own_goals", -5),
)


def round_points(value: float) -> float:
    """Round half-up to two decimals on the scaled integer.

    Values too large to scale are returned as is; non-finite values become 0.
    """

    if not math.isfinite(value):
        return 0.0
    scaled = value * 100
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / 100


def goals_against_pts(goals_against: float) -> float:
    """Penalty for goals conceded: free up to one, then -2 for each extra goal."""

    if goals_against <= 1:
        return 0.0
    return (goals_against - 1) * -2


def _weighted_sum(row: GameweekStats, weights: Tuple[Tuple[str, float], ...]) -> float:
    return sum(getattr(row, field) * weight for field, weight in weights)


def outfielder_pts(row: GameweekStats) -> float:
    weights = _OUTFIELD_WEIGHTS[row.position_code]
    total = (
        row.goals * weights.headline.goal
        + row.assists * weights.headline.assist
        + row.clean_sheet * weights.headline.clean_sheet
        + row.aerials_won * weights.aerial_won
        + _weighted_sum(row, _OUTFIELD_FLAT)
    )
    if weights.concede_penalty:
        total += goals_against_pts(row.goals_against_outfield)
    return round_points(total)


def keeper_pts(row: GameweekStats) -> float:
    total = _weighted_sum(row, _KEEPER_FLAT) + goals_against_pts(row.goals_against)
    return round_points(total)


def points_for_row(row: GameweekStats, *, is_keeper: bool) -> float:
    return keeper_pts(row) if is_keeper else outfielder_pts(row)


def headline_pts(row: GameweekStats, weights: Mapping[Position, HeadlineWeights] = _GHOST_WEIGHTS) -> float:
    headline = weights[row.position_code]
    return row.goals * headline.goal + row.assists * headline.assist + row.clean_sheet * headline.clean_sheet


def ghost_pts(row: GameweekStats) -> float:
    """Provider points left over after goals, assists and clean sheets, floored at zero."""

    if row.games_played <= 0:
        return 0.0
    residual = row.raw_fantrax_pts - headline_pts(row)
    return round_points(max(0.0, residual))
