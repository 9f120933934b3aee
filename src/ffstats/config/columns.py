"""Header maps for the provider's outfielder and keeper exports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping, Union

from ffstats.models import Position, UploadType


# Provider columns that carry nothing we persist. H/A is read from the raw
# row during ingest and never mapped.
IGNORE_COLUMNS: FrozenSet[str] = frozenset(
    {"Rk", "Status", "Age", "Opponent", "Salary", "FP/G", "Ros", "Contract", "H/A"}
)

TEXT_FIELDS: FrozenSet[str] = frozenset({"fantrax_id", "name", "team"})
OWNERSHIP_FIELDS: FrozenSet[str] = frozenset({"ownership_pct", "ownership_change"})


@dataclass(frozen=True)
class UploadFormat:
    upload_type: UploadType
    columns: Mapping[str, str]
    forced_position: Position | None = None


_COMMON_COLUMNS: Dict[str, str] = {
    "ID": "fantrax_id",
    "Player": "name",
    "Team": "team",
    "Position": "position",
    "GW": "gameweek",
    "FPts": "raw_fantrax_pts",
    "GP": "games_played",
    "GS": "games_started",
    "% Owned": "ownership_pct",
    "+/-": "ownership_change",
    "G": "goals",
    "KP": "key_passes",
    "SOT": "shots_on_target",
    "TkW": "tackles_won",
    "DIS": "dispossessed",
    "YC": "yellow_cards",
    "RC": "red_cards",
    "Int": "interceptions",
    "CLR": "clearances",
    "CoS": "dribbles_succeeded",
    "AER": "aerials_won",
    "SubOn": "subbed_on",
    "SubOff": "subbed_off",
    "OG": "own_goals",
    "CS": "clean_sheet",
}

_FORMATS: Dict[UploadType, UploadFormat] = {
    UploadType.PLAYER: UploadFormat(
        upload_type=UploadType.PLAYER,
        columns={
            **_COMMON_COLUMNS,
            "MIN": "minutes_played",
            "AT": "assists",
            "ACNC": "accurate_crosses",
            "BS": "blocked_shots",
            "PKM": "penalties_missed",
            "PKD": "penalties_drawn",
            "GAO": "goals_against_outfield",
        },
    ),
    UploadType.KEEPER: UploadFormat(
        upload_type=UploadType.KEEPER,
        columns={
            **_COMMON_COLUMNS,
            "Min": "minutes_played",
            "A": "assists",
            "GA": "goals_against",
            "Sv": "saves",
            "PKS": "penalty_saves",
            "HCS": "high_claims",
            "Sm": "smothers",
        },
        forced_position=Position.KEEPER,
    ),
}


def iter_formats() -> Iterable[UploadFormat]:
    return _FORMATS.values()


def get_format(upload_type: Union[str, UploadType]) -> UploadFormat:
    """Fetch the header map for an upload type, raising KeyError if unknown."""

    try:
        key = UploadType(upload_type.strip().lower() if isinstance(upload_type, str) else upload_type)
    except ValueError:
        raise KeyError(f"No upload format configured for type={upload_type!r}") from None
    return _FORMATS[key]
