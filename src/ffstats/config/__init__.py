"""Configuration helpers for upload formats and runtime settings."""

from .columns import IGNORE_COLUMNS, UploadFormat, get_format, iter_formats
from .settings import Settings

__all__ = [
    "IGNORE_COLUMNS",
    "Settings",
    "UploadFormat",
    "get_format",
    "iter_formats",
]
