"""Configuration loading, writing, and project initialization.

Reads TOML config files using stdlib ``tomllib`` and writes them using
``tomli_w``.  Depends only on ``models.py``.
"""

from __future__ import annotations

import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from spend_insights.models import AppConfig

CONFIG_FILENAME = "config.toml"

_DEFAULT_CONFIG_TOML = """\
# Spend Insights configuration

[general]
session_dir = "sessions"
currency_symbol = "$"

[readers]
delimiter = ""      # empty = detect from the file
sheet_name = ""     # empty = first worksheet

[columns]
# Extra source column names accepted for a canonical field, added to the
# built-in aliases.  Canonical fields: date, category, amount, description,
# merchant, payment_method.
# merchant = ["payee"]
"""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(root: Path) -> AppConfig:
    """Load ``config.toml`` from *root* and return an :class:`AppConfig`.

    Args:
        root: Directory containing ``config.toml``.

    Returns:
        A fully-populated :class:`AppConfig` instance.

    Raises:
        FileNotFoundError: If ``config.toml`` does not exist.
    """
    data = _read_toml(Path(root) / CONFIG_FILENAME)

    general = data.get("general", {})
    readers = data.get("readers", {})
    columns = data.get("columns", {})

    return AppConfig(
        session_dir=general.get("session_dir", "sessions"),
        currency_symbol=general.get("currency_symbol", "$"),
        delimiter=readers.get("delimiter", ""),
        sheet_name=readers.get("sheet_name", ""),
        extra_aliases={name: _as_list(value) for name, value in columns.items()},
    )


def save_config(root: Path, config: AppConfig) -> Path:
    """Write *config* to ``config.toml`` in *root*, replacing any existing file.

    Comments in an existing file are not preserved.

    Returns:
        The path of the written file.
    """
    payload = {
        "general": {
            "session_dir": config.session_dir,
            "currency_symbol": config.currency_symbol,
        },
        "readers": {
            "delimiter": config.delimiter,
            "sheet_name": config.sheet_name,
        },
        "columns": {name: list(aliases) for name, aliases in config.extra_aliases.items()},
    }
    path = Path(root) / CONFIG_FILENAME
    path.write_text(tomli_w.dumps(payload), encoding="utf-8")
    return path


def initialize(target_dir: Path) -> Path:
    """Create *target_dir* and a default ``config.toml`` inside it.

    Idempotent: an existing ``config.toml`` is **not** overwritten.

    Returns:
        The path of the config file.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / CONFIG_FILENAME
    _write_if_missing(path, _DEFAULT_CONFIG_TOML)
    return path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_toml(path: Path) -> dict:
    """Read and parse a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _as_list(value: str | list[str]) -> list[str]:
    """Accept a single alias string or a list of them."""
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _write_if_missing(path: Path, content: str) -> None:
    """Write *content* to *path* only if the file does not already exist."""
    if not path.exists():
        path.write_text(content, encoding="utf-8")
