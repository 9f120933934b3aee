from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class UploadResponse(BaseModel):
    success: bool
    rows_processed: int = Field(alias="rowsProcessed")
    errors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
