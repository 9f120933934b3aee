"""Player, team and fixture identity records."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Position(str, Enum):
    """Position codes used by the provider's exports."""

    KEEPER = "G"
    DEFENDER = "D"
    MIDFIELDER = "M"
    FORWARD = "F"
    OTHER = ""

    @classmethod
    def from_code(cls, code: str | None) -> "Position":
        text = (code or "").strip().upper()
        for member in cls:
            if member is not cls.OTHER and member.value == text:
                return member
        return cls.OTHER

    @property
    def label(self) -> str:
        return _POSITION_LABELS[self]


_POSITION_LABELS = {
    Position.KEEPER: "GK",
    Position.DEFENDER: "DEF",
    Position.MIDFIELDER: "MID",
    Position.FORWARD: "FWD",
    Position.OTHER: "MID",
}


class UploadType(str, Enum):
    PLAYER = "player"
    KEEPER = "keeper"


class PlayerUpsert(BaseModel):
    """Player identity sent to the store, conflict-keyed on ``external_id``."""

    external_id: str = Field(..., min_length=1)
    name: str
    team: str
    position: str
    ownership_pct: str = ""
    ownership_change: str = ""
    is_keeper: bool = False

    model_config = ConfigDict(frozen=True)


class PlayerRef(BaseModel):
    internal_id: str
    external_id: str

    model_config = ConfigDict(frozen=True)


class Team(BaseModel):
    abbrev: str = Field(..., min_length=1)
    short_name: str
    full_name: str

    model_config = ConfigDict(frozen=True)


class Fixture(BaseModel):
    """One scheduled match; unique on ``(season, gameweek, home_team)``."""

    season: str = ""
    gameweek: int = Field(..., ge=1, le=38)
    home_team: str
    away_team: str

    model_config = ConfigDict(frozen=True)
