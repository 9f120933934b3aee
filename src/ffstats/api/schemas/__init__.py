"""Pydantic models for API I/O."""

from .summary import (
    GameweekLineResponse,
    PlayerSummaryResponse,
    SeasonTotalsResponse,
    TeamCardResponse,
    TeamPlayerResponse,
    UpcomingFixtureResponse,
)
from .upload import UploadResponse

__all__ = [
    "GameweekLineResponse",
    "PlayerSummaryResponse",
    "SeasonTotalsResponse",
    "TeamCardResponse",
    "TeamPlayerResponse",
    "UpcomingFixtureResponse",
    "UploadResponse",
]
