"""SQLite-backed store for players, teams, fixtures and player gameweeks."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Sequence
from uuid import uuid4

from ffstats.models import Fixture, GameweekPayload, PlayerRef, PlayerUpsert, Team


logger = logging.getLogger(__name__)

_CHUNK = 500
_GAMEWEEK_KEY = ("player_id", "season", "gameweek")
_GAMEWEEK_COLUMNS = tuple(GameweekPayload.model_fields)


class StoreError(RuntimeError):
    """Raised when the underlying database rejects a read or write."""


@dataclass
class StoredPlayer:
    player_id: str
    external_id: str
    name: str
    team: str
    position: str
    ownership_pct: str
    ownership_change: str
    is_keeper: bool
    updated_at: datetime


class StatsStore:
    """Persist ingest output with upsert-by-key semantics.

    Every write is idempotent on its conflict key, so re-running a batch is
    safe. Database failures surface as :class:`StoreError`.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._ensure_schema()

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Unable to open database {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        stat_columns = ",\n".join(
            f"                {column} REAL NOT NULL DEFAULT 0"
            for column in _GAMEWEEK_COLUMNS
            if column not in _GAMEWEEK_KEY
        )
        with self._session() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS players (
                    id TEXT PRIMARY KEY,
                    external_id TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    team TEXT NOT NULL,
                    position TEXT NOT NULL,
                    ownership_pct TEXT NOT NULL DEFAULT '',
                    ownership_change TEXT NOT NULL DEFAULT '',
                    is_keeper INTEGER NOT NULL DEFAULT 0,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS teams (
                    abbrev TEXT PRIMARY KEY,
                    short_name TEXT NOT NULL,
                    full_name TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS fixtures (
                    season TEXT NOT NULL,
                    gameweek INTEGER NOT NULL,
                    home_team TEXT NOT NULL,
                    away_team TEXT NOT NULL,
                    UNIQUE (season, gameweek, home_team)
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS player_gameweeks (
                    player_id TEXT NOT NULL REFERENCES players(id),
                    season TEXT NOT NULL,
                    gameweek INTEGER NOT NULL,
{stat_columns},
                    PRIMARY KEY (player_id, season, gameweek)
                )
                """
            )

    def upsert_players(self, players: Sequence[PlayerUpsert]) -> List[PlayerRef]:
        """Insert or update players by external id and return their internal ids."""

        if not players:
            return []
        now = datetime.now(timezone.utc).isoformat()
        with self._session() as conn:
            conn.executemany(
                """
                INSERT INTO players (
                    id, external_id, name, team, position,
                    ownership_pct, ownership_change, is_keeper, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (external_id) DO UPDATE SET
                    name = excluded.name,
                    team = excluded.team,
                    position = excluded.position,
                    ownership_pct = excluded.ownership_pct,
                    ownership_change = excluded.ownership_change,
                    is_keeper = excluded.is_keeper,
                    updated_at = excluded.updated_at
                """,
                [
                    (
                        uuid4().hex,
                        player.external_id,
                        player.name,
                        player.team,
                        player.position,
                        player.ownership_pct,
                        player.ownership_change,
                        int(player.is_keeper),
                        now,
                    )
                    for player in players
                ],
            )
            external_ids = [player.external_id for player in players]
            refs: List[PlayerRef] = []
            for start in range(0, len(external_ids), _CHUNK):
                chunk = external_ids[start : start + _CHUNK]
                placeholders = ", ".join("?" for _ in chunk)
                rows = conn.execute(
                    f"SELECT id, external_id FROM players WHERE external_id IN ({placeholders})",
                    chunk,
                ).fetchall()
                refs.extend(PlayerRef(internal_id=row["id"], external_id=row["external_id"]) for row in rows)
        logger.debug("Upserted %s players", len(players))
        return refs

    def upsert_gameweeks(self, payloads: Sequence[GameweekPayload]) -> int:
        if not payloads:
            return 0
        columns = ", ".join(_GAMEWEEK_COLUMNS)
        placeholders = ", ".join("?" for _ in _GAMEWEEK_COLUMNS)
        updates = ",\n                    ".join(
            f"{column} = excluded.{column}" for column in _GAMEWEEK_COLUMNS if column not in _GAMEWEEK_KEY
        )
        with self._session() as conn:
            conn.executemany(
                f"""
                INSERT INTO player_gameweeks ({columns}) VALUES ({placeholders})
                ON CONFLICT (player_id, season, gameweek) DO UPDATE SET
                    {updates}
                """,
                [tuple(getattr(payload, column) for column in _GAMEWEEK_COLUMNS) for payload in payloads],
            )
        return len(payloads)

    def upsert_fixtures(self, fixtures: Sequence[Fixture]) -> int:
        if not fixtures:
            return 0
        with self._session() as conn:
            conn.executemany(
                """
                INSERT INTO fixtures (season, gameweek, home_team, away_team)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (season, gameweek, home_team) DO UPDATE SET
                    away_team = excluded.away_team
                """,
                [(f.season, f.gameweek, f.home_team, f.away_team) for f in fixtures],
            )
        return len(fixtures)

    def upsert_teams(self, teams: Sequence[Team]) -> int:
        if not teams:
            return 0
        with self._session() as conn:
            conn.executemany(
                """
                INSERT INTO teams (abbrev, short_name, full_name) VALUES (?, ?, ?)
                ON CONFLICT (abbrev) DO UPDATE SET
                    short_name = excluded.short_name,
                    full_name = excluded.full_name
                """,
                [(team.abbrev, team.short_name, team.full_name) for team in teams],
            )
        return len(teams)

    def load_fixtures(self, season: str, gameweek: Optional[int] = None) -> List[Fixture]:
        query = "SELECT season, gameweek, home_team, away_team FROM fixtures WHERE season = ?"
        params: list[str | int] = [season]
        if gameweek is not None:
            query += " AND gameweek = ?"
            params.append(gameweek)
        query += " ORDER BY gameweek, home_team"
        with self._session() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [Fixture(**dict(row)) for row in rows]

    def list_teams(self) -> List[Team]:
        with self._session() as conn:
            rows = conn.execute("SELECT abbrev, short_name, full_name FROM teams ORDER BY full_name").fetchall()
        return [Team(**dict(row)) for row in rows]

    def list_players(self, *, team: Optional[str] = None) -> List[StoredPlayer]:
        query = "SELECT * FROM players"
        params: tuple[str, ...] = ()
        if team:
            query += " WHERE team = ?"
            params = (team,)
        query += " ORDER BY name"
        with self._session() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_player(row) for row in rows]

    def get_player(self, player_id: str) -> Optional[StoredPlayer]:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return self._row_to_player(row) if row is not None else None

    def list_player_gameweeks(
        self,
        season: str,
        *,
        player_id: Optional[str] = None,
        played_only: bool = False,
    ) -> List[GameweekPayload]:
        query = "SELECT * FROM player_gameweeks WHERE season = ?"
        params: list[str] = [season]
        if player_id:
            query += " AND player_id = ?"
            params.append(player_id)
        if played_only:
            query += " AND games_played > 0"
        query += " ORDER BY gameweek"
        with self._session() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [GameweekPayload(**dict(row)) for row in rows]

    def _row_to_player(self, row: sqlite3.Row) -> StoredPlayer:
        return StoredPlayer(
            player_id=row["id"],
            external_id=row["external_id"],
            name=row["name"],
            team=row["team"],
            position=row["position"],
            ownership_pct=row["ownership_pct"],
            ownership_change=row["ownership_change"],
            is_keeper=bool(row["is_keeper"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
