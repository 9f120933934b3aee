"""Fixture-list and team-map uploads that seed the reference tables."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence

from ffstats.models import Fixture, IngestResult, Team
from ffstats.persistence import StoreError

from .coerce import coerce_number
from .gameweeks import MAX_GAMEWEEK, MIN_GAMEWEEK
from .reader import UploadError, read_rows


logger = logging.getLogger(__name__)

FIXTURE_SHEET = "FixtureKey"
TEAM_SHEET = "TeamMap"

_GAMEWEEK_KEYS = ("Gameweek", "gameweek")
_HOME_KEYS = ("HomeAbbrev", "homeabbrev")
_AWAY_KEYS = ("AwayAbbrev", "awayabbrev")
_ABBREV_KEYS = ("TeamAbbrev", "teamabbrev", "abbrev", "Abbrev")
_NAME_KEYS = ("TeamName", "teamname", "name", "Name")
_FULL_NAME_KEYS = ("TeamFullName", "teamfullname", "full_name", "Full Name", "FullName")


class ReferenceStore(Protocol):
    def upsert_fixtures(self, fixtures: Sequence[Fixture]) -> int: ...

    def upsert_teams(self, teams: Sequence[Team]) -> int: ...


def _cell(row: Mapping[str, Optional[str]], keys: Iterable[str]) -> str:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return str(value).strip()
    return ""


def fixtures_from_rows(rows: Iterable[Mapping[str, Optional[str]]], season: str) -> List[Fixture]:
    fixtures: List[Fixture] = []
    for row in rows:
        gameweek = coerce_number(_cell(row, _GAMEWEEK_KEYS))
        home = _cell(row, _HOME_KEYS).upper()
        away = _cell(row, _AWAY_KEYS).upper()
        if not gameweek.is_integer() or not MIN_GAMEWEEK <= gameweek <= MAX_GAMEWEEK:
            continue
        if not home or not away:
            continue
        fixtures.append(Fixture(season=season, gameweek=int(gameweek), home_team=home, away_team=away))
    return fixtures


def teams_from_rows(rows: Iterable[Mapping[str, Optional[str]]]) -> List[Team]:
    teams: List[Team] = []
    for row in rows:
        abbrev = _cell(row, _ABBREV_KEYS).upper()
        short_name = _cell(row, _NAME_KEYS)
        full_name = _cell(row, _FULL_NAME_KEYS)
        if abbrev and short_name and full_name:
            teams.append(Team(abbrev=abbrev, short_name=short_name, full_name=full_name))
    return teams


def ingest_fixture_file(
    content: bytes,
    *,
    filename: str = "",
    season: Optional[str],
    store: ReferenceStore,
) -> IngestResult:
    season = (season or "").strip()
    if not season:
        return IngestResult.failure("Season is required")
    if not content:
        return IngestResult.failure("No fixture file supplied")
    try:
        rows = read_rows(content, filename=filename, preferred_sheet=FIXTURE_SHEET)
    except UploadError as exc:
        return IngestResult.failure(str(exc))
    if not rows:
        return IngestResult.failure("No fixture rows found in sheet")

    fixtures = fixtures_from_rows(rows, season)
    if not fixtures:
        return IngestResult.failure("No valid fixture rows")
    try:
        count = store.upsert_fixtures(fixtures)
    except StoreError as exc:
        return IngestResult.failure(str(exc), kind="store")
    logger.info("Upserted %s fixtures for %s", count, season)
    return IngestResult(success=True, rows_processed=count)


def ingest_team_file(content: bytes, *, filename: str = "", store: ReferenceStore) -> IngestResult:
    if not content:
        return IngestResult.failure("No team file supplied")
    try:
        rows = read_rows(content, filename=filename, preferred_sheet=TEAM_SHEET)
    except UploadError as exc:
        return IngestResult.failure(str(exc))
    if not rows:
        return IngestResult.failure("No team rows found in sheet")

    teams = teams_from_rows(rows)
    if not teams:
        return IngestResult.failure("No valid team rows")
    try:
        count = store.upsert_teams(teams)
    except StoreError as exc:
        return IngestResult.failure(str(exc), kind="store")
    logger.info("Upserted %s teams", count)
    return IngestResult(success=True, rows_processed=count)
