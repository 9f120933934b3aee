"""Per-batch gameweek ingest: map, validate, resolve fixtures and upsert."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from ffstats.models import (
    Fixture,
    GameweekPayload,
    GameweekStats,
    IngestResult,
    PlayerRef,
    PlayerUpsert,
    UploadType,
)
from ffstats.persistence import StoreError
from ffstats.scoring import ghost_pts, points_for_row

from .fixtures import resolve_opponent
from .mapping import map_row, zero_stats_for_dnp
from .reader import RawRow, UploadError, read_rows


logger = logging.getLogger(__name__)

MIN_GAMEWEEK = 1
MAX_GAMEWEEK = 38
POINTS_TOLERANCE = 0.01
HOME_AWAY_COLUMN = "H/A"


class GameweekStore(Protocol):
    def load_fixtures(self, season: str, gameweek: Optional[int] = None) -> List[Fixture]: ...

    def upsert_players(self, players: Sequence[PlayerUpsert]) -> List[PlayerRef]: ...

    def upsert_gameweeks(self, payloads: Sequence[GameweekPayload]) -> int: ...


def parse_upload_params(
    upload_type: Union[str, UploadType, None],
    season: Optional[str],
    gameweek: Union[int, str, None],
) -> Tuple[UploadType, str, int]:
    """Validate the batch parameters, raising :class:`UploadError` on the first problem."""

    try:
        parsed_type = UploadType((upload_type or "").strip() if isinstance(upload_type, str) else upload_type)
    except ValueError:
        raise UploadError("Invalid type") from None

    parsed_season = (season or "").strip()
    if not parsed_season:
        raise UploadError("Season is required")

    message = f"Gameweek must be an integer between {MIN_GAMEWEEK} and {MAX_GAMEWEEK}"
    if isinstance(gameweek, bool):
        raise UploadError(message)
    try:
        number = float(str(gameweek).strip()) if gameweek is not None else float("nan")
    except ValueError:
        raise UploadError(message) from None
    if not number.is_integer() or not MIN_GAMEWEEK <= number <= MAX_GAMEWEEK:
        raise UploadError(message)
    return parsed_type, parsed_season, int(number)


def _player_upserts(rows: Sequence[GameweekStats], *, is_keeper: bool) -> List[PlayerUpsert]:
    players: Dict[str, PlayerUpsert] = {}
    for row in rows:
        players[row.fantrax_id] = PlayerUpsert(
            external_id=row.fantrax_id,
            name=row.name,
            team=row.team,
            position=row.position,
            ownership_pct=row.ownership_pct,
            ownership_change=row.ownership_change,
            is_keeper=is_keeper,
        )
    return list(players.values())


def ingest_gameweek_rows(
    raw_rows: Sequence[Mapping[str, Optional[str]]],
    *,
    upload_type: Union[str, UploadType],
    season: str,
    gameweek: Union[int, str],
    store: GameweekStore,
) -> IngestResult:
    """Run one upload batch against ``store``.

    Points mismatches and unresolved fixtures are collected as warnings while
    the row is still ingested. A failed player or gameweek upsert aborts the
    batch; players already upserted are not rolled back.
    """

    try:
        kind, season, gameweek = parse_upload_params(upload_type, season, gameweek)
    except UploadError as exc:
        return IngestResult.failure(str(exc))

    is_keeper = kind is UploadType.KEEPER
    mapped: List[Tuple[int, Mapping[str, Optional[str]], GameweekStats]] = []
    for row_number, raw in enumerate(raw_rows, start=1):
        stats = map_row(raw, kind, gameweek)
        if stats.has_identity():
            mapped.append((row_number, raw, stats))

    if not mapped:
        return IngestResult.failure("No valid rows found in CSV")

    try:
        refs = store.upsert_players(_player_upserts([stats for _, _, stats in mapped], is_keeper=is_keeper))
    except StoreError as exc:
        logger.warning("Players upsert failed for %s GW%s: %s", season, gameweek, exc)
        return IngestResult.failure(f"Players upsert failed: {exc}", kind="store")
    player_ids = {ref.external_id: ref.internal_id for ref in refs}

    errors: List[str] = []
    try:
        fixtures = store.load_fixtures(season, gameweek)
    except StoreError as exc:
        errors.append(f"Could not load fixtures for GW {gameweek}: {exc}")
        fixtures = []

    payloads: List[GameweekPayload] = []
    for row_number, raw, stats in mapped:
        player_id = player_ids.get(stats.fantrax_id)
        if not player_id:
            errors.append(f"Row {row_number}: could not resolve player_id for fantrax_id {stats.fantrax_id}")
            continue

        if stats.played:
            expected = points_for_row(stats, is_keeper=is_keeper)
            if abs(expected - stats.raw_fantrax_pts) > POINTS_TOLERANCE:
                errors.append(
                    f"Row {row_number} ({stats.name}): FPts mismatch, "
                    f"expected {expected:.2f} got {stats.raw_fantrax_pts:.2f}"
                )
            row, ghost = stats, ghost_pts(stats)
        else:
            row, ghost = zero_stats_for_dnp(stats), 0.0

        resolution = resolve_opponent(fixtures, stats.team, gameweek, raw.get(HOME_AWAY_COLUMN) or "")
        if resolution.opponent is None:
            errors.append(f"Row {row_number} ({stats.name}): fixture opponent not found for GW {gameweek}")

        payloads.append(
            GameweekPayload.from_stats(row, player_id=player_id, season=season, gameweek=gameweek, ghost_pts=ghost)
        )

    if payloads:
        try:
            store.upsert_gameweeks(payloads)
        except StoreError as exc:
            logger.warning("player_gameweeks upsert failed for %s GW%s: %s", season, gameweek, exc)
            return IngestResult.failure(f"player_gameweeks upsert failed: {exc}", kind="store")

    logger.info(
        "Ingested %s %s rows for %s GW%s with %s warnings",
        len(payloads),
        kind.value,
        season,
        gameweek,
        len(errors),
    )
    return IngestResult(success=True, rows_processed=len(payloads), errors=errors)


def ingest_gameweek_file(
    content: bytes,
    *,
    filename: str = "",
    upload_type: Union[str, UploadType, None],
    season: Optional[str],
    gameweek: Union[int, str, None],
    store: GameweekStore,
) -> IngestResult:
    """Validate parameters, parse the uploaded file and ingest its rows."""

    try:
        kind, season, gameweek = parse_upload_params(upload_type, season, gameweek)
        if not content:
            raise UploadError("Missing CSV file")
        rows: List[RawRow] = read_rows(content, filename=filename)
    except UploadError as exc:
        return IngestResult.failure(str(exc))
    return ingest_gameweek_rows(rows, upload_type=kind, season=season, gameweek=gameweek, store=store)
