"""Data models for score_sentiment pipeline stage."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SentimentScore:
    """Sentiment score of one document."""
    document_id: str
    published_at: datetime
    score: float
    method: str


@dataclass(frozen=True)
class WordContribution:
    """How much a lexicon word moves the corpus sentiment (count x valence)."""
    word: str
    count: int
    valence: float
    contribution: float
