"""Runtime settings resolved from the environment and injected by callers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional


DEFAULT_SEASON = "2025-26"
DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "ffstats.sqlite"

_DB_PATH_ENV = "FFSTATS_DB_PATH"
_SEASON_ENV = "FFSTATS_SEASON"
_ADMIN_ENV = "ADMIN_EMAILS"
_PREMIUM_ENV = "PREMIUM_USERS"


def _parse_emails(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    return frozenset(item.strip().lower() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    season: str = DEFAULT_SEASON
    admin_emails: FrozenSet[str] = field(default_factory=frozenset)
    premium_emails: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        db_raw = (env.get(_DB_PATH_ENV) or "").strip()
        season = (env.get(_SEASON_ENV) or "").strip() or DEFAULT_SEASON
        return cls(
            db_path=Path(db_raw) if db_raw else DEFAULT_DB_PATH,
            season=season,
            admin_emails=_parse_emails(env.get(_ADMIN_ENV)),
            premium_emails=_parse_emails(env.get(_PREMIUM_ENV)),
        )

    def is_admin(self, email: Optional[str]) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.admin_emails

    def is_premium(self, email: Optional[str]) -> bool:
        if not email:
            return False
        normalized = email.strip().lower()
        return normalized in self.premium_emails or normalized in self.admin_emails
