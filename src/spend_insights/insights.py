"""Insight engine: statistics, category breakdown, trend, and advice rules.

Operates on canonical transactions only.  Amounts are aggregated with their
sign, so credits offset expenses everywhere below.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from spend_insights.errors import EmptyTransactionListError
from spend_insights.models import (
    TREND_DECREASING,
    TREND_INCREASING,
    CategoryBreakdown,
    DateRange,
    Insights,
    MonthlyTrend,
    Transaction,
)

logger = logging.getLogger(__name__)

# Rule thresholds.
HIGH_DAILY_AVERAGE_WARNING = 100
HIGH_CONCENTRATION_WARNING = 50
TOP_CATEGORY_RECOMMENDATION = 40
DAILY_AVERAGE_RECOMMENDATION = 50
MIN_CATEGORY_COUNT = 5


def analyze(transactions: Sequence[Transaction]) -> Insights:
    """Derive an :class:`Insights` record from canonical transactions.

    Args:
        transactions: Non-empty list of transactions from the normalizer.

    Returns:
        The insights for the batch.

    Raises:
        EmptyTransactionListError: If *transactions* is empty.
    """
    if not transactions:
        raise EmptyTransactionListError()

    amounts = [t.amount for t in transactions]
    total_spent = sum(amounts)
    total_transactions = len(transactions)

    breakdown = category_breakdown(transactions)
    top_category, top = rank_categories(breakdown)[0]

    date_range = compute_date_range(transactions)
    daily_average = total_spent / date_range.days_covered

    insights = Insights(
        total_spent=total_spent,
        total_transactions=total_transactions,
        average_transaction=total_spent / total_transactions,
        highest_expense=max(amounts),
        lowest_expense=min(amounts),
        top_category=top_category,
        top_category_amount=top.amount,
        top_category_percentage=top.percentage,
        category_breakdown=breakdown,
        date_range=date_range,
        daily_average=daily_average,
        monthly_trend=monthly_trend(transactions),
        warnings=build_warnings(daily_average, top_category, top.percentage),
        recommendations=build_recommendations(top.percentage, daily_average, len(breakdown)),
    )
    logger.debug(
        "Analyzed %d transactions across %d categories",
        total_transactions,
        len(breakdown),
    )
    return insights


def category_breakdown(transactions: Sequence[Transaction]) -> dict[str, CategoryBreakdown]:
    """Group transactions by exact category, in first-seen order."""
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for txn in transactions:
        totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
        counts[txn.category] = counts.get(txn.category, 0) + 1

    grand_total = sum(t.amount for t in transactions)
    return {
        category: CategoryBreakdown(
            amount=amount,
            percentage=percentage(amount, grand_total),
            transaction_count=counts[category],
        )
        for category, amount in totals.items()
    }


def rank_categories(
    breakdown: dict[str, CategoryBreakdown],
) -> list[tuple[str, CategoryBreakdown]]:
    """Sort categories by amount, largest first.

    The sort is stable, so categories with equal amounts keep their
    first-seen order.
    """
    return sorted(breakdown.items(), key=lambda item: item[1].amount, reverse=True)


def percentage(amount: float, total: float) -> float | None:
    """Return *amount* as a percentage of *total*.

    A zero *total* yields ``None``.  Negative totals are not guarded and give
    sign-flipped shares.
    """
    if total == 0:
        return None
    return amount / total * 100


def compute_date_range(transactions: Sequence[Transaction]) -> DateRange:
    """Return the inclusive span of transaction dates."""
    dates = [t.date for t in transactions]
    start, end = min(dates), max(dates)
    days = (date.fromisoformat(end) - date.fromisoformat(start)).days + 1
    return DateRange(start_date=start, end_date=end, days_covered=max(days, 1))


def monthly_trend(transactions: Sequence[Transaction]) -> MonthlyTrend | None:
    """Compare the first and last calendar month totals.

    Returns ``None`` when all transactions fall in a single month.  Equal
    first and last totals count as decreasing.
    """
    by_month: dict[str, float] = {}
    for txn in transactions:
        key = txn.date[:7]
        by_month[key] = by_month.get(key, 0.0) + txn.amount

    months = sorted(by_month)
    if len(months) < 2:
        return None

    first, last = by_month[months[0]], by_month[months[-1]]
    direction = TREND_INCREASING if last > first else TREND_DECREASING
    return MonthlyTrend(
        trend_direction=direction,
        monthly_data={month: by_month[month] for month in months},
    )


def build_warnings(
    daily_average: float,
    top_category: str,
    top_percentage: float | None,
) -> list[str]:
    """Evaluate the warning rules.  An undefined percentage trips no rule."""
    warnings: list[str] = []
    if daily_average > HIGH_DAILY_AVERAGE_WARNING:
        warnings.append(f"High daily spending average: ${daily_average:.2f}")
    if top_percentage is not None and top_percentage > HIGH_CONCENTRATION_WARNING:
        warnings.append(f"High concentration in {top_category}: {top_percentage:.1f}%")
    return warnings


def build_recommendations(
    top_percentage: float | None,
    daily_average: float,
    category_count: int,
) -> list[str]:
    """Evaluate the recommendation rules.  An undefined percentage trips no rule."""
    recommendations: list[str] = []
    if top_percentage is not None and top_percentage > TOP_CATEGORY_RECOMMENDATION:
        recommendations.append("Consider reducing spending in your top category")
    if daily_average > DAILY_AVERAGE_RECOMMENDATION:
        recommendations.append("Try to reduce daily spending average")
    if category_count < MIN_CATEGORY_COUNT:
        recommendations.append(
            "Consider categorizing expenses more granularly for better tracking"
        )
    return recommendations
