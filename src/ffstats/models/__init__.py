"""Canonical records shared across ingestion, scoring and summaries."""

from .player import Fixture, PlayerRef, PlayerUpsert, Position, Team, UploadType
from .result import IngestResult
from .stats import STAT_FIELDS, GameweekPayload, GameweekStats

__all__ = [
    "Fixture",
    "GameweekPayload",
    "GameweekStats",
    "IngestResult",
    "PlayerRef",
    "PlayerUpsert",
    "Position",
    "STAT_FIELDS",
    "Team",
    "UploadType",
]
