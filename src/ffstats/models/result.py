from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


FailureKind = Literal["input", "store"]


class IngestResult(BaseModel):
    """Outcome of one upload batch: ``{success, rowsProcessed, errors}`` on the wire."""

    success: bool
    rows_processed: int = Field(default=0, ge=0, alias="rowsProcessed")
    errors: List[str] = Field(default_factory=list)
    failure_kind: Optional[FailureKind] = Field(default=None, exclude=True)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def failure(cls, *messages: str, kind: FailureKind = "input") -> "IngestResult":
        return cls(success=False, rows_processed=0, errors=list(messages), failure_kind=kind)
