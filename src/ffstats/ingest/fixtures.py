"""Resolve opponent and home/away from the authoritative fixture list."""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from ffstats.models import Fixture


class FixtureResolution(NamedTuple):
    opponent: Optional[str]
    is_home: Optional[bool]


UNRESOLVED = FixtureResolution(None, None)


def team_code(value: Optional[str]) -> str:
    """Normalize a team code for comparison."""

    return (value or "").strip().upper()


def resolve_opponent(
    fixtures: Sequence[Fixture],
    team: str,
    gameweek: int,
    home_away: Optional[str] = "",
) -> FixtureResolution:
    """Find ``team``'s fixture in ``gameweek``.

    A hint of ``"H"`` or ``"A"`` restricts the match to that side; any other
    hint accepts either side. Any opponent named in the source file is never
    consulted.
    """

    normalized_team = team_code(team)
    hint = (home_away or "").strip().upper()
    if not normalized_team:
        return UNRESOLVED

    for fixture in fixtures:
        if int(fixture.gameweek) != int(gameweek):
            continue
        home = team_code(fixture.home_team)
        away = team_code(fixture.away_team)
        if hint == "H":
            if home == normalized_team:
                return FixtureResolution(fixture.away_team, True)
        elif hint == "A":
            if away == normalized_team:
                return FixtureResolution(fixture.home_team, False)
        elif home == normalized_team:
            return FixtureResolution(fixture.away_team, True)
        elif away == normalized_team:
            return FixtureResolution(fixture.home_team, False)
    return UNRESOLVED
