"""Tests for spend_insights.insights — statistics, breakdown, trend, rules."""

from __future__ import annotations

import pytest

from spend_insights.errors import EmptyTransactionListError
from spend_insights.insights import (
    analyze,
    build_recommendations,
    build_warnings,
    category_breakdown,
    compute_date_range,
    monthly_trend,
    percentage,
    rank_categories,
)
from spend_insights.models import Transaction


def _txn(date: str, category: str, amount: float, description: str = "x") -> Transaction:
    return Transaction(date=date, category=category, amount=amount, description=description)


# ---------------------------------------------------------------------------
# analyze()
# ---------------------------------------------------------------------------


class TestAnalyze:
    """End-to-end tests for analyze()."""

    def test_two_food_transactions(self):
        insights = analyze(
            [_txn("2024-01-01", "Food", 20), _txn("2024-01-02", "Food", 30)]
        )

        assert insights.total_spent == 50
        assert insights.total_transactions == 2
        assert insights.average_transaction == 25
        assert insights.highest_expense == 30
        assert insights.lowest_expense == 20
        assert insights.top_category == "Food"
        assert insights.top_category_amount == 50
        assert insights.top_category_percentage == 100
        assert insights.date_range.start_date == "2024-01-01"
        assert insights.date_range.end_date == "2024-01-02"
        assert insights.date_range.days_covered == 2
        assert insights.daily_average == 25
        assert insights.monthly_trend is None

    def test_two_food_transactions_rules(self):
        """100% in one category trips concentration rules; few categories
        trips the granularity recommendation."""
        insights = analyze(
            [_txn("2024-01-01", "Food", 20), _txn("2024-01-02", "Food", 30)]
        )
        assert insights.warnings == ["High concentration in Food: 100.0%"]
        assert insights.recommendations == [
            "Consider reducing spending in your top category",
            "Consider categorizing expenses more granularly for better tracking",
        ]

    def test_empty_raises(self):
        with pytest.raises(EmptyTransactionListError, match="No transactions provided"):
            analyze([])

    def test_empty_error_is_value_error(self):
        with pytest.raises(ValueError):
            analyze([])

    def test_signed_totals(self):
        """Credits offset expenses; highest/lowest are signed."""
        insights = analyze(
            [
                _txn("2024-01-01", "Shopping", 100),
                _txn("2024-01-01", "Shopping", -40),
                _txn("2024-01-01", "Food", 10),
            ]
        )
        assert insights.total_spent == 70
        assert insights.lowest_expense == -40
        assert insights.highest_expense == 100
        assert insights.category_breakdown["Shopping"].amount == 60
        assert insights.category_breakdown["Shopping"].transaction_count == 2

    def test_single_transaction_covers_one_day(self):
        insights = analyze([_txn("2024-04-10", "Rent", 1500)])
        assert insights.date_range.days_covered == 1
        assert insights.daily_average == 1500

    def test_unordered_dates(self):
        insights = analyze(
            [_txn("2024-03-10", "A", 1), _txn("2024-01-01", "A", 1), _txn("2024-02-01", "A", 1)]
        )
        assert insights.date_range.start_date == "2024-01-01"
        assert insights.date_range.end_date == "2024-03-10"
        assert insights.date_range.days_covered == 70

    def test_sample_batch(self, sample_transactions):
        insights = analyze(sample_transactions)

        assert insights.total_transactions == 6
        assert insights.total_spent == pytest.approx(396.45)
        assert insights.top_category == "Food - Dining"
        assert insights.top_category_amount == pytest.approx(120.5)
        assert insights.date_range.days_covered == 47
        assert insights.monthly_trend is not None
        assert insights.monthly_trend.trend_direction == "increasing"
        assert list(insights.category_breakdown) == [
            "Groceries",
            "Food - Dining",
            "Transport",
            "Utilities",
        ]


# ---------------------------------------------------------------------------
# Category breakdown and ranking
# ---------------------------------------------------------------------------


class TestCategoryBreakdown:
    """Tests for grouping and percentages."""

    def test_percentages_sum_to_100(self, sample_transactions):
        breakdown = category_breakdown(sample_transactions)
        assert sum(b.percentage for b in breakdown.values()) == pytest.approx(100)

    def test_zero_total_gives_undefined_percentage(self):
        breakdown = category_breakdown(
            [_txn("2024-01-01", "Refund", -25), _txn("2024-01-02", "Shopping", 25)]
        )
        assert breakdown["Refund"].percentage is None
        assert breakdown["Shopping"].percentage is None

    def test_negative_total_is_unguarded(self):
        breakdown = category_breakdown(
            [_txn("2024-01-01", "Refund", -100), _txn("2024-01-02", "Food", 50)]
        )
        assert breakdown["Refund"].percentage == pytest.approx(200)
        assert breakdown["Food"].percentage == pytest.approx(-100)

    def test_zero_total_does_not_crash_analyze(self):
        insights = analyze([_txn("2024-01-01", "A", -5), _txn("2024-01-01", "B", 5)])
        assert insights.top_category_percentage is None
        assert not any("concentration" in w for w in insights.warnings)
        assert "Consider reducing spending in your top category" not in insights.recommendations

    def test_percentage_helper(self):
        assert percentage(25, 200) == 12.5
        assert percentage(1, 0) is None


class TestRankCategories:
    """Tests for the top-category ordering."""

    def test_descending_by_amount(self):
        breakdown = category_breakdown(
            [_txn("2024-01-01", "Small", 1), _txn("2024-01-01", "Big", 9)]
        )
        assert [name for name, _ in rank_categories(breakdown)] == ["Big", "Small"]

    def test_ties_keep_first_seen_order(self):
        txns = [
            _txn("2024-01-01", "Beta", 10),
            _txn("2024-01-01", "Alpha", 10),
            _txn("2024-01-01", "Gamma", 10),
        ]
        assert analyze(txns).top_category == "Beta"
        ranked = rank_categories(category_breakdown(txns))
        assert [name for name, _ in ranked] == ["Beta", "Alpha", "Gamma"]


# ---------------------------------------------------------------------------
# Date range and monthly trend
# ---------------------------------------------------------------------------


class TestDateRange:
    """Tests for compute_date_range()."""

    def test_crosses_leap_day(self):
        dr = compute_date_range([_txn("2024-02-28", "A", 1), _txn("2024-03-01", "A", 1)])
        assert dr.days_covered == 3


class TestMonthlyTrend:
    """Tests for monthly_trend()."""

    def test_single_month_has_no_trend(self):
        assert monthly_trend([_txn("2024-01-01", "A", 1), _txn("2024-01-31", "A", 9)]) is None

    def test_increasing(self):
        trend = monthly_trend([_txn("2024-01-05", "A", 10), _txn("2024-02-05", "A", 20)])
        assert trend.trend_direction == "increasing"
        assert trend.monthly_data == {"2024-01": 10, "2024-02": 20}

    def test_decreasing(self):
        trend = monthly_trend([_txn("2024-01-05", "A", 30), _txn("2024-02-05", "A", 20)])
        assert trend.trend_direction == "decreasing"

    def test_tie_is_decreasing(self):
        trend = monthly_trend([_txn("2024-01-05", "A", 20), _txn("2024-03-05", "A", 20)])
        assert trend.trend_direction == "decreasing"

    def test_compares_first_and_last_months_only(self):
        """A middle month does not affect the direction."""
        trend = monthly_trend(
            [
                _txn("2024-03-01", "A", 15),
                _txn("2024-01-01", "A", 10),
                _txn("2024-02-01", "A", 999),
            ]
        )
        assert trend.trend_direction == "increasing"
        assert list(trend.monthly_data) == ["2024-01", "2024-02", "2024-03"]

    def test_year_boundary(self):
        trend = monthly_trend([_txn("2024-01-01", "A", 5), _txn("2023-12-31", "A", 50)])
        assert list(trend.monthly_data) == ["2023-12", "2024-01"]
        assert trend.trend_direction == "decreasing"


# ---------------------------------------------------------------------------
# Warning and recommendation rules
# ---------------------------------------------------------------------------


class TestWarnings:
    """Tests for build_warnings() thresholds."""

    def test_high_daily_average(self):
        warnings = build_warnings(150.456, "Food", 10)
        assert warnings == ["High daily spending average: $150.46"]

    def test_daily_average_at_threshold_is_quiet(self):
        assert build_warnings(100, "Food", 10) == []

    def test_high_concentration(self):
        assert build_warnings(0, "Rent", 62.25) == ["High concentration in Rent: 62.2%"]

    def test_concentration_at_threshold_is_quiet(self):
        assert build_warnings(0, "Rent", 50) == []

    def test_undefined_percentage_is_quiet(self):
        assert build_warnings(0, "Rent", None) == []

    def test_both_fire(self):
        assert len(build_warnings(101, "Rent", 51)) == 2

    def test_daily_warning_tracks_daily_average(self):
        """A daily-average warning appears exactly when the average exceeds 100."""
        over = analyze([_txn("2024-01-01", "A", 250), _txn("2024-01-02", "B", 10)])
        under = analyze([_txn("2024-01-01", "A", 150), _txn("2024-01-02", "B", 10)])
        assert over.daily_average > 100
        assert any("daily spending average" in w for w in over.warnings)
        assert under.daily_average <= 100
        assert not any("daily spending average" in w for w in under.warnings)


class TestRecommendations:
    """Tests for build_recommendations() thresholds."""

    def test_none_fire(self):
        assert build_recommendations(40, 50, 5) == []

    def test_top_category(self):
        assert build_recommendations(40.1, 0, 5) == [
            "Consider reducing spending in your top category"
        ]

    def test_daily_average(self):
        assert build_recommendations(0, 50.01, 5) == ["Try to reduce daily spending average"]

    def test_few_categories(self):
        assert build_recommendations(0, 0, 4) == [
            "Consider categorizing expenses more granularly for better tracking"
        ]

    def test_undefined_percentage_fires_nothing(self):
        assert build_recommendations(None, 0, 5) == []
