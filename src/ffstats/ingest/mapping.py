"""Map raw provider rows onto :class:`GameweekStats`."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from ffstats.config.columns import IGNORE_COLUMNS, OWNERSHIP_FIELDS, TEXT_FIELDS, get_format
from ffstats.models import STAT_FIELDS, GameweekStats, UploadType

from .coerce import coerce_number


_CODE_FIELDS = frozenset({"team", "position"})


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def map_row(
    row: Mapping[str, Optional[Any]],
    upload_type: Union[str, UploadType],
    target_gameweek: int,
) -> GameweekStats:
    """Translate one header->cell mapping into a fully populated stat row.

    Ignored and unknown headers are skipped. Identity fields are trimmed,
    team and position codes are upper-cased (position is forced to the
    keeper code for keeper uploads), ownership columns stay as display
    strings, and everything else is coerced to a finite number.
    """

    fmt = get_format(upload_type)
    data: Dict[str, Any] = {}
    gameweek_value = 0.0

    for header, value in row.items():
        if header is None:
            continue
        column = str(header).strip()
        if column in IGNORE_COLUMNS:
            continue
        field = fmt.columns.get(column)
        if field is None:
            continue
        if field in _CODE_FIELDS:
            data[field] = _text(value).upper()
        elif field in TEXT_FIELDS or field in OWNERSHIP_FIELDS:
            data[field] = _text(value)
        elif field == "gameweek":
            gameweek_value = coerce_number(value)
        else:
            data[field] = coerce_number(value)

    if fmt.forced_position is not None:
        data["position"] = fmt.forced_position.value

    data["gameweek"] = int(gameweek_value) if gameweek_value else target_gameweek
    return GameweekStats(**data)


def zero_stats_for_dnp(row: GameweekStats) -> GameweekStats:
    """Drop every stat, points included, from a row where the player did not play."""

    return row.model_copy(update={field: 0.0 for field in STAT_FIELDS})
