"""Source reader registry.

Each reader is a module exposing a ``read(path, **options)`` function that
returns a list of raw row mappings.  Readers only decode the file format;
column mapping and validation belong to the normalizer.  The ``READERS``
dict maps format names (used on the command line) to read functions, and
``reader_for_path()`` picks one from a file suffix.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from spend_insights.errors import ReaderError
from spend_insights.readers import delimited, spreadsheet, structured

READERS: dict[str, Callable] = {
    "csv": delimited.read,
    "xlsx": spreadsheet.read,
    "json": structured.read,
}

SUFFIXES: dict[str, str] = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".xlsx": "xlsx",
    ".xlsm": "xlsx",
    ".json": "json",
}


def get_reader(name: str) -> Callable:
    """Look up a reader by format name.

    Raises:
        KeyError: If no reader is registered under *name*.
    """
    return READERS[name]


def format_for_path(path: str | Path) -> str:
    """Return the format name for *path* based on its suffix.

    Raises:
        ReaderError: If the suffix is not recognized.
    """
    suffix = Path(path).suffix.lower()
    try:
        return SUFFIXES[suffix]
    except KeyError:
        supported = ", ".join(sorted(SUFFIXES))
        raise ReaderError(
            f"Unsupported file type {suffix or '(none)'!r} for {path}. Supported: {supported}"
        ) from None


def reader_for_path(path: str | Path) -> Callable:
    """Return the read function matching the suffix of *path*."""
    return READERS[format_for_path(path)]
