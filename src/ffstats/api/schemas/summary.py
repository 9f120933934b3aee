from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class GameweekLineResponse(BaseModel):
    gameweek: int
    opponent: Optional[str]
    is_home: Optional[bool]
    games_played: float
    games_started: float
    minutes_played: float
    raw_fantrax_pts: float
    ghost_pts: float
    attack_pts: float


class SeasonTotalsResponse(BaseModel):
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


class UpcomingFixtureResponse(BaseModel):
    gameweek: int
    is_home: bool
    opponent_code: str
    opponent_name: str


class PlayerSummaryResponse(BaseModel):
    player_id: str
    name: str
    team: str
    team_name: str
    position: str
    season: str
    summary: SeasonTotalsResponse
    gameweeks: List[GameweekLineResponse]
    next_fixtures: List[UpcomingFixtureResponse]


class TeamPlayerResponse(BaseModel):
    player_id: str
    name: str
    position: str
    season_pts: float
    avg_pts_per_game: float
    ghost_per_game: float


class TeamCardResponse(BaseModel):
    team: str
    team_name: str
    total_points: float
    avg_points_per_player_per_game: float
    top_scorer: str
    top_scorer_pts: float
    top_ghost: str
    top_ghost_per_game: float
    players: List[TeamPlayerResponse]
