"""Read-time season aggregation for dashboards."""

from .season import (
    DecoratedGameweek,
    PlayerSeasonSummary,
    TeamCard,
    TeamPlayerLine,
    UpcomingFixture,
    decorate_gameweeks,
    display_position,
    next_fixtures,
    summarize_player_season,
    summarize_teams,
    team_name_map,
)

__all__ = [
    "DecoratedGameweek",
    "PlayerSeasonSummary",
    "TeamCard",
    "TeamPlayerLine",
    "UpcomingFixture",
    "decorate_gameweeks",
    "display_position",
    "next_fixtures",
    "summarize_player_season",
    "summarize_teams",
    "team_name_map",
]
