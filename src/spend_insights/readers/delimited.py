"""Delimited-text reader (CSV, TSV, semicolon- or pipe-separated).

The first line is the header.  Every following non-blank line becomes one
row mapping header names to the raw cell strings.  Cells are not trimmed or
converted; an empty cell stays ``""`` so the normalizer can tell a present
but empty column from a missing one.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from spend_insights.errors import ReaderError

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = ",;\t|"
_SNIFF_BYTES = 8192


def read(file_path: Path, delimiter: str | None = None) -> list[dict[str, str]]:
    """Read a delimited text file into raw rows.

    Args:
        file_path: Path to the file.  UTF-8, with or without a BOM.
        delimiter: Field delimiter.  When empty or ``None`` it is sniffed
            from the start of the file, falling back to a comma.

    Returns:
        One dict per data row, keyed by header name.

    Raises:
        ReaderError: If the file cannot be read or has no header row.
    """
    try:
        with open(file_path, newline="", encoding="utf-8-sig") as f:
            sample = f.read(_SNIFF_BYTES)
            f.seek(0)
            dialect_delimiter = delimiter or sniff_delimiter(sample)
            reader = csv.DictReader(f, delimiter=dialect_delimiter)
            if reader.fieldnames is None:
                raise ReaderError(f"{file_path}: empty file or no header row")
            rows = [_clean_row(row) for row in reader]
    except FileNotFoundError as exc:
        raise ReaderError(f"{file_path}: file not found") from exc
    except UnicodeDecodeError as exc:
        raise ReaderError(f"{file_path}: not valid UTF-8 text") from exc
    except (OSError, csv.Error) as exc:
        raise ReaderError(f"Error parsing CSV: {exc}") from exc

    rows = [row for row in rows if any(v.strip() for v in row.values())]
    logger.debug("Read %d rows from %s", len(rows), file_path)
    return rows


def sniff_delimiter(sample: str) -> str:
    """Guess the delimiter of *sample*, defaulting to a comma."""
    try:
        return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return ","


def _clean_row(row: dict) -> dict[str, str]:
    """Drop the overflow/short-row artifacts ``csv.DictReader`` produces.

    Extra cells beyond the header land under a ``None`` key and missing
    trailing cells come back as ``None`` values; both are discarded.
    """
    return {key: value for key, value in row.items() if key is not None and value is not None}
