"""Exception hierarchy for Spend Insights.

Every error here is terminal for the current analysis: nothing is retried,
and the CLI is the only layer that turns them into user-facing messages.
"""

from __future__ import annotations

from typing import Any


class SpendInsightsError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(SpendInsightsError):
    """Raw rows could not be turned into canonical transactions."""


class NoDataError(ValidationError):
    """The input row sequence was empty."""

    def __init__(self) -> None:
        super().__init__("No data provided")


class MissingColumnError(ValidationError):
    """A required canonical column is absent from the first row."""

    def __init__(self, missing: list[str] | tuple[str, ...]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class InvalidDateError(ValidationError):
    """A present date value could not be parsed as a calendar date."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid date format: {value}")


class InvalidAmountError(ValidationError):
    """A present amount value could not be parsed as a finite number."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid amount: {value}")


class NoValidTransactionsError(ValidationError):
    """Every row was dropped during cleaning."""

    def __init__(self) -> None:
        super().__init__("No valid transactions found after cleaning data")


class EmptyTransactionListError(SpendInsightsError, ValueError):
    """The insight engine was given zero transactions."""

    def __init__(self) -> None:
        super().__init__("No transactions provided")


class ReaderError(SpendInsightsError):
    """A source file could not be decoded into rows."""


class InterchangeError(SpendInsightsError):
    """A serialized session payload is malformed."""
