"""Spreadsheet reader for ``.xlsx`` workbooks.

Reads one worksheet with ``openpyxl``.  The first row is the header; each
later row becomes a mapping of header name to cell value.  Empty cells are
left out of the mapping and fully empty rows are skipped, matching the usual
sheet-to-records conversion.  Date cells arrive as ``datetime`` objects and
numbers as ``int``/``float``.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from spend_insights.errors import ReaderError

logger = logging.getLogger(__name__)


def read(file_path: Path, sheet_name: str | None = None) -> list[dict[str, Any]]:
    """Read a worksheet into raw rows.

    Args:
        file_path: Path to the workbook.
        sheet_name: Worksheet to read.  Defaults to the first worksheet.

    Returns:
        One dict per non-empty data row, keyed by header text.

    Raises:
        ReaderError: If the workbook cannot be opened or the sheet does not
            exist.
    """
    try:
        workbook = load_workbook(file_path, read_only=True, data_only=True)
    except FileNotFoundError as exc:
        raise ReaderError(f"{file_path}: file not found") from exc
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as exc:
        raise ReaderError(f"Error parsing Excel: {exc}") from exc

    try:
        if sheet_name:
            if sheet_name not in workbook.sheetnames:
                raise ReaderError(
                    f"{file_path}: no worksheet named {sheet_name!r} "
                    f"(available: {', '.join(workbook.sheetnames)})"
                )
            worksheet = workbook[sheet_name]
        else:
            worksheet = workbook.worksheets[0]

        values = worksheet.iter_rows(values_only=True)
        header = next(values, None)
        if header is None:
            return []
        rows = [_row_to_dict(header, cells) for cells in values]
    finally:
        workbook.close()

    rows = [row for row in rows if row]
    logger.debug("Read %d rows from %s (%s)", len(rows), file_path, sheet_name or "first sheet")
    return rows


def _row_to_dict(header: tuple, cells: tuple) -> dict[str, Any]:
    """Pair header names with cell values, skipping blanks."""
    row: dict[str, Any] = {}
    for name, value in zip(header, cells):
        if name is None or value is None:
            continue
        if isinstance(value, str) and value == "":
            continue
        row[str(name)] = value
    return row
