"""Reader for manually entered data: a JSON array of objects."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from spend_insights.errors import ReaderError


def read(file_path: Path) -> list[dict[str, Any]]:
    """Read a JSON file holding an array of row objects.

    Raises:
        ReaderError: If the file is missing or does not hold an array of
            objects.
    """
    try:
        text = Path(file_path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ReaderError(f"{file_path}: file not found") from exc
    except OSError as exc:
        raise ReaderError(f"{file_path}: {exc}") from exc
    return read_text(text)


def read_text(text: str) -> list[dict[str, Any]]:
    """Parse JSON text holding an array of row objects.

    Raises:
        ReaderError: If *text* is not valid JSON, is not an array, or holds
            something other than objects.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReaderError(f"Error parsing manual data: {exc}") from exc

    if not isinstance(data, list):
        raise ReaderError("Error parsing manual data: expected a JSON array of objects")
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ReaderError(
                f"Error parsing manual data: item {index} is {type(item).__name__}, not an object"
            )
    return data
