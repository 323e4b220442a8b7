"""CSV export writer and analysis summary printer.

- :func:`export_transactions` writes the canonical transactions to a CSV
  file with a fixed column schema.
- :func:`print_summary` prints the insights to stdout: summary cards,
  spending by category, the monthly table, warnings, and recommendations.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from pathlib import Path

from spend_insights.insights import rank_categories
from spend_insights.models import Insights, Transaction

# Fixed output column order.
CSV_COLUMNS = [
    "date",
    "category",
    "amount",
    "description",
    "merchant",
    "payment_method",
]


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_transactions(transactions: Sequence[Transaction], output_path: str | Path) -> Path:
    """Write canonical transactions to *output_path*.

    Rows keep their input order.  Unset merchant and payment method are
    written as empty cells.  Overwrites an existing file and creates the
    parent directory if needed.

    Returns:
        The :class:`~pathlib.Path` of the written CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for txn in transactions:
            writer.writerow(
                {
                    "date": txn.date,
                    "category": txn.category,
                    "amount": repr(txn.amount),
                    "description": txn.description,
                    "merchant": txn.merchant or "",
                    "payment_method": txn.payment_method or "",
                }
            )

    return output_path


# ---------------------------------------------------------------------------
# Summary printer
# ---------------------------------------------------------------------------


def print_summary(insights: Insights, source: str = "", currency: str = "$") -> None:
    """Print a human-readable analysis summary to stdout.

    Args:
        insights: The insights to display.
        source: Optional label for where the data came from, shown in the
            header.
        currency: Symbol placed in front of amounts.
    """

    def money(value: float) -> str:
        sign = "-" if value < 0 else ""
        return f"{sign}{currency}{abs(value):,.2f}"

    dr = insights.date_range

    print()
    print(f"== Spending Summary: {source} ==" if source else "== Spending Summary ==")
    print(f"Period:       {dr.start_date} to {dr.end_date} ({dr.days_covered} days)")
    print(f"Total spent:  {money(insights.total_spent)}")
    print(f"Transactions: {insights.total_transactions}")
    print(f"Average:      {money(insights.average_transaction)}")
    print(f"Daily avg:    {money(insights.daily_average)}")
    print(f"Highest:      {money(insights.highest_expense)}")
    print(f"Lowest:       {money(insights.lowest_expense)}")
    print(
        f"Top category: {insights.top_category} "
        f"({money(insights.top_category_amount)}, "
        f"{_format_pct(insights.top_category_percentage)})"
    )

    # Spending by category
    print()
    print("Spending by category:")
    for name, item in rank_categories(insights.category_breakdown):
        print(
            f"  {name + ':':<25} {money(item.amount):>12}  "
            f"{_format_pct(item.percentage):>7}  ({item.transaction_count} txns)"
        )

    # Monthly trend
    trend = insights.monthly_trend
    if trend is not None:
        print()
        print(f"Monthly spending ({trend.trend_direction}):")
        for month, amount in trend.monthly_data.items():
            print(f"  {month}  {money(amount):>12}")

    if insights.warnings:
        print()
        print(f"Warnings: {len(insights.warnings)}")
        for w in insights.warnings:
            print(f"  - {w}")

    if insights.recommendations:
        print()
        print("Recommendations:")
        for r in insights.recommendations:
            print(f"  - {r}")

    print()


def _format_pct(value: float | None) -> str:
    """Format a percentage, showing ``n/a`` when it is undefined."""
    if value is None:
        return "n/a"
    return f"{value:.1f}%"
