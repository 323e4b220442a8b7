"""Core data models for Spend Insights.

This module defines all dataclasses used throughout the pipeline. It has zero
internal imports -- everything depends on it, but it depends on nothing within
the package.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# A loosely-typed row as produced by a source reader: string keys mapping to
# scalar values (str, int, float, date/datetime, or None).
RawRow = Mapping[str, Any]

TREND_INCREASING = "increasing"
TREND_DECREASING = "decreasing"


@dataclass(frozen=True)
class Transaction:
    """A single canonical spending record.

    Built once by the normalizer from one raw row and never mutated.

    Attributes:
        date: Calendar date as an ISO ``YYYY-MM-DD`` string.
        category: Display category. Commas are replaced with ``" - "``.
            Defaults to ``"Uncategorized"``.
        amount: Signed amount exactly as given by the source. The sign
            convention (expense vs. credit) is not normalized.
        description: Display description. Defaults to ``"No description"``.
        merchant: Merchant/payee name, or ``None`` if the source had none.
        payment_method: Payment method, or ``None`` if the source had none.
    """

    date: str
    category: str
    amount: float
    description: str
    merchant: str | None = None
    payment_method: str | None = None


@dataclass
class MappedRow:
    """A raw row after column-alias mapping, before value coercion.

    Every canonical field is optional.  ``present`` records which canonical
    fields had a matching source column, independent of the value, so a
    column that exists but holds an empty cell still counts as present.
    """

    date: Any = None
    category: Any = None
    amount: Any = None
    description: Any = None
    merchant: Any = None
    payment_method: Any = None
    present: frozenset[str] = frozenset()

    def missing_fields(self, required: tuple[str, ...]) -> list[str]:
        """Return the names in *required* that had no source column."""
        return [name for name in required if name not in self.present]


@dataclass(frozen=True)
class CategoryBreakdown:
    """Aggregate for a single category.

    Attributes:
        amount: Summed signed amount of the category's transactions.
        percentage: Share of the grand total, in percent, or ``None`` when
            the grand total is exactly zero.
        transaction_count: Number of transactions in the category.
    """

    amount: float
    percentage: float | None
    transaction_count: int


@dataclass(frozen=True)
class DateRange:
    """Span of dates covered by a batch of transactions.

    Attributes:
        start_date: Earliest transaction date (ISO).
        end_date: Latest transaction date (ISO).
        days_covered: Inclusive day count between the two, at least 1.
    """

    start_date: str
    end_date: str
    days_covered: int


@dataclass(frozen=True)
class MonthlyTrend:
    """First-vs-last month direction of spending.

    Attributes:
        trend_direction: ``"increasing"`` or ``"decreasing"``.
        monthly_data: ``YYYY-MM`` month key to summed amount, in
            chronological order.
    """

    trend_direction: str
    monthly_data: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Insights:
    """The complete derived summary for one batch of transactions."""

    total_spent: float
    total_transactions: int
    average_transaction: float
    highest_expense: float
    lowest_expense: float
    top_category: str
    top_category_amount: float
    top_category_percentage: float | None
    category_breakdown: dict[str, CategoryBreakdown]
    date_range: DateRange
    daily_average: float
    monthly_trend: MonthlyTrend | None = None
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Return type of the pipeline.

    Attributes:
        transactions: The canonical transactions produced by the normalizer.
        insights: The insights derived from *transactions*.
        source: Where the raw rows came from (a file path, or a label for
            in-memory input).  Display only.
    """

    transactions: list[Transaction]
    insights: Insights
    source: str = ""


@dataclass
class AppConfig:
    """Top-level application configuration loaded from config.toml.

    Attributes:
        session_dir: Default directory for saved analysis sessions.
            Default: "sessions".
        currency_symbol: Symbol shown in front of amounts in the terminal
            summary.  Default: "$".
        delimiter: Field delimiter for delimited-text input, or empty
            string to sniff it from the file.
        sheet_name: Worksheet to read from spreadsheet input, or empty
            string for the first worksheet.
        extra_aliases: Additional source column names accepted for a
            canonical field, keyed by canonical field name
            (e.g. ``{"merchant": ["payee"]}``).  Appended to the built-in
            alias table.
    """

    session_dir: str = "sessions"
    currency_symbol: str = "$"
    delimiter: str = ""
    sheet_name: str = ""
    extra_aliases: dict[str, list[str]] = field(default_factory=dict)
