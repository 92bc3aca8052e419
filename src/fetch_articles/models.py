"""Data models for fetch_articles pipeline stage."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Article:
    """Article record returned by the content API."""
    id: str
    section_name: str
    published_at: datetime
    byline: str | None
    body_text: str
    word_count: int
    headline: str | None = None
