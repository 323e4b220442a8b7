"""JSON interchange for analysis sessions.

Serializes canonical transactions and the :class:`Insights` record so the
presentation side can pick them up later without re-running the pipeline.
Nothing is transformed on the way through: reading back what was written
yields objects equal to the originals.

Payload shape (keys use the presentation layer's camelCase names)::

    {
        "version": 1,
        "transactions": [{"date": "2024-01-01", "category": "Food", ...}],
        "insights": {"totalSpent": 50.0, "categoryBreakdown": {...}, ...}
    }

Optional transaction fields and ``monthlyTrend`` are omitted when unset.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from spend_insights.errors import InterchangeError
from spend_insights.models import (
    CategoryBreakdown,
    DateRange,
    Insights,
    MonthlyTrend,
    Transaction,
)

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    """Convert a Transaction to its interchange dict."""
    data: dict[str, Any] = {
        "date": txn.date,
        "category": txn.category,
        "amount": txn.amount,
        "description": txn.description,
    }
    if txn.merchant is not None:
        data["merchant"] = txn.merchant
    if txn.payment_method is not None:
        data["paymentMethod"] = txn.payment_method
    return data


def transaction_from_dict(data: dict[str, Any]) -> Transaction:
    """Build a Transaction from its interchange dict."""
    try:
        return Transaction(
            date=data["date"],
            category=data["category"],
            amount=data["amount"],
            description=data["description"],
            merchant=data.get("merchant"),
            payment_method=data.get("paymentMethod"),
        )
    except (KeyError, TypeError) as exc:
        raise InterchangeError(f"Malformed transaction: {exc}") from exc


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


def insights_to_dict(insights: Insights) -> dict[str, Any]:
    """Convert an Insights record to its interchange dict."""
    data: dict[str, Any] = {
        "totalSpent": insights.total_spent,
        "totalTransactions": insights.total_transactions,
        "averageTransaction": insights.average_transaction,
        "highestExpense": insights.highest_expense,
        "lowestExpense": insights.lowest_expense,
        "topCategory": insights.top_category,
        "topCategoryAmount": insights.top_category_amount,
        "topCategoryPercentage": insights.top_category_percentage,
        "categoryBreakdown": {
            name: {
                "amount": item.amount,
                "percentage": item.percentage,
                "transactionCount": item.transaction_count,
            }
            for name, item in insights.category_breakdown.items()
        },
        "dateRange": {
            "startDate": insights.date_range.start_date,
            "endDate": insights.date_range.end_date,
            "daysCovered": insights.date_range.days_covered,
        },
        "dailyAverage": insights.daily_average,
        "warnings": list(insights.warnings),
        "recommendations": list(insights.recommendations),
    }
    if insights.monthly_trend is not None:
        data["monthlyTrend"] = {
            "trendDirection": insights.monthly_trend.trend_direction,
            "monthlyData": dict(insights.monthly_trend.monthly_data),
        }
    return data


def insights_from_dict(data: dict[str, Any]) -> Insights:
    """Build an Insights record from its interchange dict."""
    try:
        trend_data = data.get("monthlyTrend")
        trend = None
        if trend_data is not None:
            trend = MonthlyTrend(
                trend_direction=trend_data["trendDirection"],
                monthly_data=dict(trend_data["monthlyData"]),
            )
        date_range = data["dateRange"]
        return Insights(
            total_spent=data["totalSpent"],
            total_transactions=data["totalTransactions"],
            average_transaction=data["averageTransaction"],
            highest_expense=data["highestExpense"],
            lowest_expense=data["lowestExpense"],
            top_category=data["topCategory"],
            top_category_amount=data["topCategoryAmount"],
            top_category_percentage=data["topCategoryPercentage"],
            category_breakdown={
                name: CategoryBreakdown(
                    amount=item["amount"],
                    percentage=item["percentage"],
                    transaction_count=item["transactionCount"],
                )
                for name, item in data["categoryBreakdown"].items()
            },
            date_range=DateRange(
                start_date=date_range["startDate"],
                end_date=date_range["endDate"],
                days_covered=date_range["daysCovered"],
            ),
            daily_average=data["dailyAverage"],
            monthly_trend=trend,
            warnings=list(data.get("warnings", [])),
            recommendations=list(data.get("recommendations", [])),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise InterchangeError(f"Malformed insights: {exc}") from exc


# ---------------------------------------------------------------------------
# Session payloads
# ---------------------------------------------------------------------------


def dumps(transactions: Sequence[Transaction], insights: Insights) -> str:
    """Serialize a session to JSON text."""
    payload = {
        "version": FORMAT_VERSION,
        "transactions": [transaction_to_dict(t) for t in transactions],
        "insights": insights_to_dict(insights),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)


def loads(text: str) -> tuple[list[Transaction], Insights]:
    """Parse JSON text written by :func:`dumps`.

    Raises:
        InterchangeError: If *text* is not a valid session payload.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InterchangeError(f"Session is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise InterchangeError("Session payload must be a JSON object")
    version = payload.get("version")
    if version != FORMAT_VERSION:
        raise InterchangeError(f"Unsupported session version: {version!r}")
    if "transactions" not in payload or "insights" not in payload:
        raise InterchangeError("Session payload needs 'transactions' and 'insights'")

    transactions = [transaction_from_dict(item) for item in payload["transactions"]]
    return transactions, insights_from_dict(payload["insights"])


def save_session(path: Path, transactions: Sequence[Transaction], insights: Insights) -> Path:
    """Write a session file, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(transactions, insights), encoding="utf-8")
    logger.debug("Wrote session: %s", path)
    return path


def load_session(path: Path) -> tuple[list[Transaction], Insights]:
    """Read a session file written by :func:`save_session`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        InterchangeError: If the file is not a valid session payload.
    """
    return loads(Path(path).read_text(encoding="utf-8"))
