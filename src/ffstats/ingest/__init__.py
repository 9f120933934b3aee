"""Input adapters that turn provider exports into persisted rows."""

from .coerce import coerce_number
from .fixtures import FixtureResolution, resolve_opponent, team_code
from .gameweeks import GameweekStore, ingest_gameweek_file, ingest_gameweek_rows, parse_upload_params
from .mapping import map_row, zero_stats_for_dnp
from .reader import UploadError, parse_csv, parse_workbook, read_rows
from .reference import (
    fixtures_from_rows,
    ingest_fixture_file,
    ingest_team_file,
    teams_from_rows,
)

__all__ = [
    "FixtureResolution",
    "GameweekStore",
    "UploadError",
    "coerce_number",
    "fixtures_from_rows",
    "ingest_fixture_file",
    "ingest_gameweek_file",
    "ingest_gameweek_rows",
    "ingest_team_file",
    "map_row",
    "parse_csv",
    "parse_upload_params",
    "parse_workbook",
    "read_rows",
    "resolve_opponent",
    "team_code",
    "teams_from_rows",
    "zero_stats_for_dnp",
]
