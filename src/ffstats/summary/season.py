"""Fold persisted gameweek rows into season totals, averages and splits.

Nothing here is cached: summaries are rebuilt from raw rows on every read,
and opponent/home flags are re-resolved from the fixture list each time.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ffstats.ingest.fixtures import resolve_opponent, team_code
from ffstats.models import Fixture, GameweekPayload, Position, Team
from ffstats.persistence import StoredPlayer


@dataclass(frozen=True)
class DecoratedGameweek:
    row: GameweekPayload
    opponent: Optional[str]
    is_home: Optional[bool]

    @property
    def gameweek(self) -> int:
        return self.row.gameweek

    @property
    def attack_pts(self) -> float:
        return self.row.goals + self.row.assists + self.row.clean_sheet


@dataclass(frozen=True)
class PlayerSeasonSummary:
    season_total_pts: float
    avg_pts_per_game: float
    avg_pts_per_start: float
    total_ghost_pts: float
    avg_ghost_per_game: float
    avg_ghost_per_start: float
    games_played: int
    games_started: int
    home_avg: float
    away_avg: float
    home_pct: float
    away_pct: float
    attack_pts: float
    goals: float
    assists: float
    clean_sheets: float
    saves: float
    tackles: float
    interceptions: float
    clearances: float
    aerials: float
    key_passes: float
    current_gameweek: int


@dataclass(frozen=True)
class TeamPlayerLine:
    player_id: str
    name: str
    position: str
    season_pts: float
    avg_pts_per_game: float
    ghost_per_game: float


@dataclass(frozen=True)
class TeamCard:
    team: str
    team_name: str
    total_points: float
    avg_points_per_player_per_game: float
    top_scorer: str
    top_scorer_pts: float
    top_ghost: str
    top_ghost_per_game: float
    players: List[TeamPlayerLine]


@dataclass(frozen=True)
class UpcomingFixture:
    gameweek: int
    is_home: bool
    opponent_code: str
    opponent_name: str


def display_position(code: str) -> str:
    return Position.from_code(code).label


def team_name_map(teams: Iterable[Team]) -> Dict[str, str]:
    return {team_code(team.abbrev): team.full_name or team.short_name or team.abbrev for team in teams}


def decorate_gameweeks(
    rows: Sequence[GameweekPayload],
    team: str,
    fixtures: Sequence[Fixture],
) -> List[DecoratedGameweek]:
    decorated = []
    for row in rows:
        resolution = resolve_opponent(fixtures, team, row.gameweek)
        decorated.append(DecoratedGameweek(row=row, opponent=resolution.opponent, is_home=resolution.is_home))
    return decorated


def _total(rows: Iterable[DecoratedGameweek], field: str) -> float:
    return sum(getattr(item.row, field) for item in rows)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def summarize_player_season(rows: Sequence[DecoratedGameweek]) -> PlayerSeasonSummary:
    played = [item for item in rows if item.row.games_played == 1]
    started = [item for item in rows if item.row.games_started == 1]
    home = [item for item in played if item.is_home is True]
    away = [item for item in played if item.is_home is False]

    season_total = _total(played, "raw_fantrax_pts")
    ghost_total = _total(played, "ghost_pts")
    start_total = _total(started, "raw_fantrax_pts")
    start_ghost_total = _total(started, "ghost_pts")
    home_total = _total(home, "raw_fantrax_pts")
    away_total = _total(away, "raw_fantrax_pts")

    return PlayerSeasonSummary(
        season_total_pts=season_total,
        avg_pts_per_game=_ratio(season_total, len(played)),
        avg_pts_per_start=_ratio(start_total, len(started)),
        total_ghost_pts=ghost_total,
        avg_ghost_per_game=_ratio(ghost_total, len(played)),
        avg_ghost_per_start=_ratio(start_ghost_total, len(started)),
        games_played=len(played),
        games_started=len(started),
        home_avg=_ratio(home_total, len(home)),
        away_avg=_ratio(away_total, len(away)),
        home_pct=_ratio(home_total, season_total) * 100,
        away_pct=_ratio(away_total, season_total) * 100,
        attack_pts=sum(item.attack_pts for item in rows),
        goals=_total(played, "goals"),
        assists=_total(played, "assists"),
        clean_sheets=_total(played, "clean_sheet"),
        saves=_total(played, "saves"),
        tackles=_total(played, "tackles_won"),
        interceptions=_total(played, "interceptions"),
        clearances=_total(played, "clearances"),
        aerials=_total(played, "aerials_won"),
        key_passes=_total(played, "key_passes"),
        current_gameweek=max((item.gameweek for item in rows), default=0),
    )


def fixtures_by_team(fixtures: Iterable[Fixture]) -> Dict[str, List[Fixture]]:
    grouped: Dict[str, List[Fixture]] = defaultdict(list)
    for fixture in fixtures:
        grouped[team_code(fixture.home_team)].append(fixture)
        grouped[team_code(fixture.away_team)].append(fixture)
    return dict(grouped)


def summarize_teams(
    teams: Sequence[Team],
    players: Sequence[StoredPlayer],
    gameweeks: Sequence[GameweekPayload],
    fixtures: Sequence[Fixture],
) -> List[TeamCard]:
    """Build one card per team from every player's season summary."""

    names = team_name_map(teams)
    team_fixtures = fixtures_by_team(fixtures)
    rows_by_player: Dict[str, List[GameweekPayload]] = defaultdict(list)
    for row in gameweeks:
        rows_by_player[row.player_id].append(row)

    lines_by_team: Dict[str, List[TeamPlayerLine]] = defaultdict(list)
    games_by_team: Dict[str, float] = defaultdict(float)
    for player in players:
        key = team_code(player.team)
        player_rows = sorted(rows_by_player.get(player.player_id, []), key=lambda row: row.gameweek)
        decorated = decorate_gameweeks(player_rows, player.team, team_fixtures.get(key, []))
        summary = summarize_player_season(decorated)
        lines_by_team[key].append(
            TeamPlayerLine(
                player_id=player.player_id,
                name=player.name,
                position=display_position(player.position),
                season_pts=summary.season_total_pts,
                avg_pts_per_game=summary.avg_pts_per_game,
                ghost_per_game=summary.avg_ghost_per_game,
            )
        )
        games_by_team[key] += sum(row.games_played for row in player_rows if row.games_played > 0)

    cards: List[TeamCard] = []
    for team in teams:
        key = team_code(team.abbrev)
        lines = sorted(lines_by_team.get(key, []), key=lambda line: line.season_pts, reverse=True)
        total_points = sum(line.season_pts for line in lines)
        top_scorer = lines[0] if lines else None
        top_ghost = max(lines, key=lambda line: line.ghost_per_game) if lines else None
        cards.append(
            TeamCard(
                team=team.abbrev,
                team_name=names.get(key, team.abbrev),
                total_points=total_points,
                avg_points_per_player_per_game=_ratio(total_points, games_by_team.get(key, 0.0)),
                top_scorer=top_scorer.name if top_scorer else "-",
                top_scorer_pts=top_scorer.season_pts if top_scorer else 0.0,
                top_ghost=top_ghost.name if top_ghost else "-",
                top_ghost_per_game=top_ghost.ghost_per_game if top_ghost else 0.0,
                players=lines,
            )
        )
    return cards


def next_fixtures(
    team: str,
    fixtures: Sequence[Fixture],
    current_gameweek: int,
    team_names: Mapping[str, str],
    limit: int = 5,
) -> List[UpcomingFixture]:
    key = team_code(team)
    upcoming = sorted(
        (
            fixture
            for fixture in fixtures
            if fixture.gameweek > current_gameweek
            and key in (team_code(fixture.home_team), team_code(fixture.away_team))
        ),
        key=lambda fixture: fixture.gameweek,
    )
    result = []
    for fixture in upcoming[: max(0, limit)]:
        is_home = team_code(fixture.home_team) == key
        opponent = fixture.away_team if is_home else fixture.home_team
        result.append(
            UpcomingFixture(
                gameweek=fixture.gameweek,
                is_home=is_home,
                opponent_code=opponent,
                opponent_name=team_names.get(team_code(opponent), opponent),
            )
        )
    return result
