"""Spend Insights: normalize personal transaction exports and summarize spending."""

__version__ = "0.1.0"
