"""Normalized per-gameweek stat rows and the persisted payload built from them."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .player import Position


# Numeric fields zeroed on "did not play" rows, in export order.
STAT_FIELDS: Tuple[str, ...] = (
    "raw_fantrax_pts",
    "games_played",
    "games_started",
    "minutes_played",
    "goals",
    "key_passes",
    "assists",
    "shots_on_target",
    "tackles_won",
    "dispossessed",
    "yellow_cards",
    "red_cards",
    "accurate_crosses",
    "interceptions",
    "clearances",
    "dribbles_succeeded",
    "blocked_shots",
    "aerials_won",
    "subbed_on",
    "subbed_off",
    "penalties_missed",
    "penalties_drawn",
    "own_goals",
    "goals_against_outfield",
    "clean_sheet",
    "goals_against",
    "saves",
    "penalty_saves",
    "high_claims",
    "smothers",
)


class GameweekStats(BaseModel):
    """One spreadsheet row after column mapping and numeric coercion."""

    fantrax_id: str = ""
    name: str = ""
    team: str = ""
    position: str = ""
    gameweek: int = 0
    ownership_pct: str = ""
    ownership_change: str = ""

    raw_fantrax_pts: float = 0.0
    games_played: float = 0.0
    games_started: float = 0.0
    minutes_played: float = 0.0
    goals: float = 0.0
    key_passes: float = 0.0
    assists: float = 0.0
    shots_on_target: float = 0.0
    tackles_won: float = 0.0
    dispossessed: float = 0.0
    yellow_cards: float = 0.0
    red_cards: float = 0.0
    accurate_crosses: float = 0.0
    interceptions: float = 0.0
    clearances: float = 0.0
    dribbles_succeeded: float = 0.0
    blocked_shots: float = 0.0
    aerials_won: float = 0.0
    subbed_on: float = 0.0
    subbed_off: float = 0.0
    penalties_missed: float = 0.0
    penalties_drawn: float = 0.0
    own_goals: float = 0.0
    goals_against_outfield: float = 0.0
    clean_sheet: float = 0.0
    goals_against: float = 0.0
    saves: float = 0.0
    penalty_saves: float = 0.0
    high_claims: float = 0.0
    smothers: float = 0.0

    model_config = ConfigDict(frozen=True)

    @property
    def position_code(self) -> Position:
        return Position.from_code(self.position)

    @property
    def played(self) -> bool:
        return self.games_played > 0

    def has_identity(self) -> bool:
        return bool(self.fantrax_id and self.name and self.team)


class GameweekPayload(BaseModel):
    """Row persisted to ``player_gameweeks``, keyed by (player_id, season, gameweek)."""

    player_id: str = Field(..., min_length=1)
    season: str = Field(..., min_length=1)
    gameweek: int = Field(..., ge=1, le=38)
    ghost_pts: float = Field(default=0.0, ge=0.0)

    raw_fantrax_pts: float = 0.0
    games_played: float = 0.0
    games_started: float = 0.0
    minutes_played: float = 0.0
    goals: float = 0.0
    key_passes: float = 0.0
    assists: float = 0.0
    shots_on_target: float = 0.0
    tackles_won: float = 0.0
    dispossessed: float = 0.0
    yellow_cards: float = 0.0
    red_cards: float = 0.0
    accurate_crosses: float = 0.0
    interceptions: float = 0.0
    clearances: float = 0.0
    dribbles_succeeded: float = 0.0
    blocked_shots: float = 0.0
    aerials_won: float = 0.0
    subbed_on: float = 0.0
    subbed_off: float = 0.0
    penalties_missed: float = 0.0
    penalties_drawn: float = 0.0
    own_goals: float = 0.0
    goals_against_outfield: float = 0.0
    clean_sheet: float = 0.0
    goals_against: float = 0.0
    saves: float = 0.0
    penalty_saves: float = 0.0
    high_claims: float = 0.0
    smothers: float = 0.0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_stats(
        cls,
        stats: GameweekStats,
        *,
        player_id: str,
        season: str,
        gameweek: int,
        ghost_pts: float,
    ) -> "GameweekPayload":
        values = {field: getattr(stats, field) for field in STAT_FIELDS}
        return cls(
            player_id=player_id,
            season=season,
            gameweek=gameweek,
            ghost_pts=ghost_pts,
            **values,
        )
