"""Turn uploaded CSV/XLSX bytes into header->cell rows."""

from __future__ import annotations

import csv
import io
import logging
from typing import Dict, List, Optional, Union

from openpyxl import load_workbook


logger = logging.getLogger(__name__)

RawRow = Dict[str, str]

_EXCEL_SUFFIXES = (".xlsx", ".xlsm")


class UploadError(ValueError):
    """Raised when an upload cannot be read or its parameters are invalid."""


def _decode(content: Union[bytes, str]) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def parse_csv(content: Union[bytes, str]) -> List[RawRow]:
    """Parse CSV text with a header row, skipping blank lines.

    Rows whose field count differs from the header are collected and reported
    together as one :class:`UploadError`.
    """

    reader = csv.DictReader(io.StringIO(_decode(content), newline=""))
    rows: List[RawRow] = []
    problems: List[str] = []
    try:
        for index, row in enumerate(reader, start=1):
            extra = row.get(None)
            values = [value for key, value in row.items() if key is not None]
            if not extra and not any((value or "").strip() for value in values):
                continue
            if extra:
                problems.append(f"CSV parse error on row {index}: Too many fields")
                continue
            if any(value is None for value in values):
                problems.append(f"CSV parse error on row {index}: Too few fields")
                continue
            rows.append({key.strip(): value for key, value in row.items() if key is not None})
    except csv.Error as exc:
        raise UploadError(f"CSV parse error on line {reader.line_num}: {exc}") from exc
    if problems:
        raise UploadError("; ".join(problems))
    return rows


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_workbook(content: bytes, *, preferred_sheet: Optional[str] = None) -> List[RawRow]:
    """Read the preferred sheet (matched case-insensitively) or the first one."""

    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        raise UploadError(f"Failed to parse workbook: {exc}") from exc
    try:
        if not workbook.sheetnames:
            raise UploadError("No sheets found in workbook")
        sheet_name = workbook.sheetnames[0]
        if preferred_sheet:
            wanted = preferred_sheet.strip().lower()
            for name in workbook.sheetnames:
                if name.strip().lower() == wanted:
                    sheet_name = name
                    break
        worksheet = workbook[sheet_name]
        values = worksheet.iter_rows(values_only=True)
        header_row = next(values, None)
        if not header_row:
            return []
        headers = [_cell_text(cell) for cell in header_row]
        rows: List[RawRow] = []
        for raw in values:
            row = {
                header: _cell_text(cell)
                for header, cell in zip(headers, raw)
                if header
            }
            if any(row.values()):
                rows.append(row)
        logger.debug("Read %s rows from sheet %s", len(rows), sheet_name)
        return rows
    finally:
        workbook.close()


def read_rows(content: bytes, *, filename: str = "", preferred_sheet: Optional[str] = None) -> List[RawRow]:
    """Dispatch on the file name: Excel workbooks via openpyxl, everything else as CSV."""

    if not content:
        raise UploadError("Uploaded file is empty")
    if filename.lower().endswith(_EXCEL_SUFFIXES):
        return parse_workbook(content, preferred_sheet=preferred_sheet)
    return parse_csv(content)
