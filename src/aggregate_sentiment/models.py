"""Data models for aggregate_sentiment pipeline stage."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SummaryRow:
    """Mean sentiment of one group; count is always >= 1."""
    key: date | int | str
    mean_sentiment: float
    count: int


@dataclass(frozen=True)
class SummaryTables:
    by_day: tuple[SummaryRow, ...]
    by_topic: tuple[SummaryRow, ...]
    by_author: tuple[SummaryRow, ...]
    by_section: tuple[SummaryRow, ...]
