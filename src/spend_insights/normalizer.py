"""Raw row normalization.

Turns loosely-keyed rows from any source reader into canonical
:class:`~spend_insights.models.Transaction` objects:

1. Lower-case and trim every key.
2. Map source columns onto canonical fields through :data:`COLUMN_ALIASES`.
3. Check the first mapped row for the required columns.
4. Drop rows with a missing date or amount.
5. Coerce values; a present-but-malformed date or amount fails the batch.

Rows with *missing* values are dropped silently while *malformed* values are
a hard failure.  Callers rely on that asymmetry.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

from spend_insights.errors import (
    InvalidAmountError,
    InvalidDateError,
    MissingColumnError,
    NoDataError,
    NoValidTransactionsError,
)
from spend_insights.models import MappedRow, RawRow, Transaction

logger = logging.getLogger(__name__)

# Canonical field -> accepted (normalized) source column names.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date", "transaction_date", "transaction date"),
    "category": ("category", "type", "expense_category", "expense category"),
    "amount": ("amount", "value", "cost", "price"),
    "description": ("description", "desc", "details", "memo", "note"),
    "merchant": ("merchant", "store", "vendor"),
    "paymentmethod": ("payment method", "payment_method", "payment_type", "payment type"),
}

REQUIRED_COLUMNS: tuple[str, ...] = ("date", "category", "amount", "description")

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_DESCRIPTION = "No description"

# Two unrelated fallback dates. Text parsed the same against both named a
# full year, month, and day; otherwise dateutil filled parts in from them.
_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# A comma and any whitespace around it.
_COMMA = re.compile(r"\s*,\s*")

# Canonical alias-table names -> MappedRow attribute names.
_FIELD_ATTRS = {
    "date": "date",
    "category": "category",
    "amount": "amount",
    "description": "description",
    "merchant": "merchant",
    "paymentmethod": "payment_method",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(
    rows: Sequence[RawRow],
    extra_aliases: Mapping[str, Sequence[str]] | None = None,
) -> list[Transaction]:
    """Normalize raw rows into canonical transactions.

    Args:
        rows: Raw rows from a source reader.  Keys are matched
            case-insensitively after trimming.
        extra_aliases: Additional accepted source column names per
            canonical field, appended to :data:`COLUMN_ALIASES`.

    Returns:
        The canonical transactions, in input order.

    Raises:
        NoDataError: If *rows* is empty.
        MissingColumnError: If the first row lacks a required column.
        InvalidDateError: If any kept row has an unparseable date.
        InvalidAmountError: If any kept row has a non-numeric amount.
        NoValidTransactionsError: If no rows survive cleaning.
    """
    if not rows:
        raise NoDataError()

    aliases = build_alias_table(extra_aliases)
    mapped = [map_row(normalize_keys(row), aliases) for row in rows]

    missing = mapped[0].missing_fields(REQUIRED_COLUMNS)
    if missing:
        raise MissingColumnError(missing)

    kept = [m for m in mapped if not _is_empty(m.date) and not _is_empty(m.amount)]
    dropped = len(mapped) - len(kept)
    if dropped:
        logger.debug("Dropped %d of %d rows with a missing date or amount", dropped, len(mapped))

    transactions = [_to_transaction(m) for m in kept]

    if not transactions:
        raise NoValidTransactionsError()

    logger.debug("Normalized %d transactions", len(transactions))
    return transactions


def build_alias_table(
    extra_aliases: Mapping[str, Sequence[str]] | None = None,
) -> dict[str, tuple[str, ...]]:
    """Return :data:`COLUMN_ALIASES` with *extra_aliases* appended.

    Extra alias names are normalized the same way row keys are.  Unknown
    canonical field names are ignored with a warning.
    """
    table = dict(COLUMN_ALIASES)
    for field_name, names in (extra_aliases or {}).items():
        key = field_name.strip().lower().replace("_", "")
        if key not in table:
            logger.warning("Ignoring aliases for unknown column %r", field_name)
            continue
        extra = tuple(n.strip().lower() for n in names if n.strip().lower() not in table[key])
        table[key] = table[key] + extra
    return table


def normalize_keys(row: RawRow) -> dict[str, Any]:
    """Lower-case and trim every key of *row*.

    Keys that collide after folding keep the last value, at the position of
    the first occurrence.
    """
    return {str(key).strip().lower(): value for key, value in row.items()}


def map_row(
    row: Mapping[str, Any],
    aliases: Mapping[str, Sequence[str]] = COLUMN_ALIASES,
) -> MappedRow:
    """Map a key-normalized row onto the canonical fields.

    For each canonical field the row's keys are scanned in order and the
    first key that is an accepted alias wins.
    """
    values: dict[str, Any] = {}
    present: set[str] = set()
    for canonical, accepted in aliases.items():
        for key in row:
            if key in accepted:
                values[_FIELD_ATTRS[canonical]] = row[key]
                present.add(canonical)
                break
    return MappedRow(present=frozenset(present), **values)


def parse_date(value: Any) -> str:
    """Parse *value* as a calendar date and return it as ``YYYY-MM-DD``.

    ``date`` and ``datetime`` objects (as produced by spreadsheet readers)
    are used as-is.  Anything else is parsed as text, which must name a
    year, month, and day.  Time of day is discarded and no timezone
    conversion is applied.

    Raises:
        InvalidDateError: If *value* is not a recognizable date, or leaves
            part of the date unspecified (e.g. ``"March"``).
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        raise InvalidDateError(value)
    text = str(value).strip()
    try:
        first, second = (date_parser.parse(text, default=d).date() for d in _DATE_DEFAULTS)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(value) from exc
    if first != second:
        raise InvalidDateError(value)
    return first.isoformat()


def parse_amount(value: Any) -> float:
    """Parse *value* as a finite real number.

    Digit-group underscores (``"1_000"``) are not accepted.

    Raises:
        InvalidAmountError: If *value* is not numeric, or is NaN/infinite.
    """
    if isinstance(value, bool) or (isinstance(value, str) and "_" in value):
        raise InvalidAmountError(value)
    try:
        amount = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidAmountError(value) from exc
    if not math.isfinite(amount):
        raise InvalidAmountError(value)
    return amount


def clean_category(value: Any) -> str:
    """Trim a category and replace each comma with ``" - "``.

    Whitespace around a comma is folded into the separator, so
    ``"Food, Dining"`` becomes ``"Food - Dining"``.
    """
    text = _clean_text(value)
    if text is None:
        return DEFAULT_CATEGORY
    return _COMMA.sub(" - ", text)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _to_transaction(row: MappedRow) -> Transaction:
    """Coerce a mapped row with a date and amount into a Transaction."""
    return Transaction(
        date=parse_date(row.date),
        category=clean_category(row.category),
        amount=parse_amount(row.amount),
        description=_clean_text(row.description) or DEFAULT_DESCRIPTION,
        merchant=_clean_text(row.merchant),
        payment_method=_clean_text(row.payment_method),
    )


def _is_empty(value: Any) -> bool:
    """True for absent values: ``None`` or the empty string."""
    return value is None or (isinstance(value, str) and value == "")


def _clean_text(value: Any) -> str | None:
    """Return *value* as a trimmed string, or ``None`` if blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
