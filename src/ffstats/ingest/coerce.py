"""Tolerant conversion of spreadsheet cells to finite floats."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def coerce_number(value: Any) -> float:
    """Return ``value`` as a finite float, or 0.0 for blanks, garbage and NaN/inf."""

    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
        return number if math.isfinite(number) else 0.0
    return 0.0
