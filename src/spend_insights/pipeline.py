"""Pipeline orchestration for Spend Insights.

Composes the three stages: read, normalize, and analyze.  Any stage failure
propagates unchanged, so a run either yields a complete
:class:`~spend_insights.models.AnalysisResult` or raises.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from spend_insights.insights import analyze
from spend_insights.models import AnalysisResult, AppConfig, RawRow
from spend_insights.normalizer import normalize
from spend_insights.readers import format_for_path, get_reader

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_file(
    path: Path,
    config: AppConfig | None = None,
    fmt: str | None = None,
) -> AnalysisResult:
    """Read, normalize, and analyze one source file.

    Args:
        path: The source file.
        config: Application configuration.  Defaults to :class:`AppConfig`.
        fmt: Reader format name (``"csv"``, ``"xlsx"``, ``"json"``).  When
            omitted it is inferred from the file suffix.

    Returns:
        The canonical transactions and their insights.

    Raises:
        ReaderError: If the file cannot be decoded.
        ValidationError: If the rows cannot be normalized.
    """
    config = config or AppConfig()
    path = Path(path)
    fmt = fmt or format_for_path(path)

    logger.info("Reading %s as %s", path, fmt)
    rows = _read(path, fmt, config)
    logger.info("Read %d rows", len(rows))

    return analyze_rows(rows, config=config, source=str(path))


def analyze_rows(
    rows: Sequence[RawRow],
    config: AppConfig | None = None,
    source: str = "",
) -> AnalysisResult:
    """Normalize and analyze rows already produced by a reader.

    Raises:
        ValidationError: If the rows cannot be normalized.
    """
    config = config or AppConfig()

    transactions = normalize(rows, extra_aliases=config.extra_aliases)
    logger.info("Normalized %d of %d rows", len(transactions), len(rows))

    insights = analyze(transactions)
    logger.info(
        "Analyzed %d transactions: total %.2f, top category %r",
        insights.total_transactions,
        insights.total_spent,
        insights.top_category,
    )

    return AnalysisResult(transactions=transactions, insights=insights, source=source)


# ---------------------------------------------------------------------------
# Stage implementations
# ---------------------------------------------------------------------------


def _read(path: Path, fmt: str, config: AppConfig) -> list[dict]:
    """Stage 1: decode *path* with the reader for *fmt*."""
    reader = get_reader(fmt)
    if fmt == "csv":
        return reader(path, delimiter=config.delimiter or None)
    if fmt == "xlsx":
        return reader(path, sheet_name=config.sheet_name or None)
    return reader(path)
