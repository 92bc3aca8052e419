"""Data models for clean_articles pipeline stage."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CleanedArticle:
    """Article with body text normalized (markup and special characters stripped)."""
    id: str
    section_name: str
    published_at: datetime
    byline: str | None
    body_text: str
    word_count: int
    headline: str | None
    body_text_cleaned: str
