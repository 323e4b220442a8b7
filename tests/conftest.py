"""Shared pytest fixtures for Spend Insights tests.

Provides reusable fixtures for:
- Paths to the sample source files under tests/fixtures/.
- xlsx_file: a small workbook built with openpyxl at test time.
- sample_rows: raw rows as a reader would produce them.
- sample_transactions: canonical transactions spanning two months.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import Workbook

from spend_insights.models import Transaction

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Fixture file path helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the tests/fixtures/ directory."""
    return FIXTURES_DIR


@pytest.fixture
def transactions_csv() -> Path:
    """Comma-separated export with all six columns, spanning two months."""
    return FIXTURES_DIR / "transactions.csv"


@pytest.fixture
def semicolon_csv() -> Path:
    """Semicolon-separated export using alias column names."""
    return FIXTURES_DIR / "semicolon.csv"


@pytest.fixture
def manual_json() -> Path:
    """JSON array of manually entered rows."""
    return FIXTURES_DIR / "manual.json"


@pytest.fixture
def xlsx_file(tmp_path: Path) -> Path:
    """Workbook whose first sheet holds expenses and second sheet holds notes.

    The "Expenses" sheet holds a header row, three data rows (dates as real
    datetime cells, amounts as numbers), and one fully empty row.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Expenses"
    ws.append(["Transaction Date", "Expense Category", "Price", "Details", "Store"])
    ws.append([datetime(2024, 5, 1, 12, 0), "Books", 12.99, "Paperback", "Tattered Cover"])
    ws.append([datetime(2024, 5, 3), "Books", 30, "Hardcover", None])
    ws.append([None, None, None, None, None])
    ws.append([datetime(2024, 6, 2), "Music", 9.99, "Album", "Bandcamp"])

    notes = wb.create_sheet("Notes")
    notes.append(["Date", "Category", "Amount", "Description"])
    notes.append(["2024-07-01", "Other", 1, "Note row"])

    path = tmp_path / "expenses.xlsx"
    wb.save(path)
    return path


# ---------------------------------------------------------------------------
# Rows and transactions
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_rows() -> list[dict]:
    """Raw rows with messy headers, as a delimited reader would return them."""
    return [
        {" Date ": "2024-01-01", "CATEGORY": "Food", "Amount": "20", "Description": "Lunch"},
        {" Date ": "2024-01-02", "CATEGORY": "Food", "Amount": "30", "Description": "Dinner"},
    ]


def _make_txn(
    date: str = "2024-01-15",
    category: str = "Food",
    amount: float = 10.0,
    description: str = "Test",
    merchant: str | None = None,
    payment_method: str | None = None,
) -> Transaction:
    """Build a Transaction with sensible defaults."""
    return Transaction(
        date=date,
        category=category,
        amount=amount,
        description=description,
        merchant=merchant,
        payment_method=payment_method,
    )


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Six transactions over January and February 2024, four categories."""
    return [
        _make_txn("2024-01-05", "Groceries", 54.20, "Weekly shop", "King Soopers", "Debit Card"),
        _make_txn("2024-01-12", "Food - Dining", 32.50, "Dinner out", "Chipotle", "Credit Card"),
        _make_txn("2024-01-20", "Transport", 40.00, "Gas", "Shell", "Credit Card"),
        _make_txn("2024-02-03", "Groceries", 61.75, "Weekly shop", "King Soopers", "Debit Card"),
        _make_txn("2024-02-14", "Food - Dining", 88.00, "Valentine's dinner", None, "Credit Card"),
        _make_txn("2024-02-20", "Utilities", 120.00, "Electric bill", "Xcel Energy", None),
    ]
