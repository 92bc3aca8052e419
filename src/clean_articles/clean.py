"""Core clean logic."""

import logging
import re

from clean_articles.models import CleanedArticle
from fetch_articles.models import Article

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"<[^>]*>")
# Anything that is not alphanumeric, whitespace, apostrophe or slash
DISALLOWED_PATTERN = re.compile(r"[^\w\s'/]|_")
WHITESPACE_PATTERN = re.compile(r"\s+")
APOSTROPHES = str.maketrans({"’": "'", "‘": "'"})


def normalize_text(text: str | None) -> str:
    """Strip markup tags and special characters, then collapse whitespace.

    Removed characters are replaced with a space rather than deleted so that
    adjacent words are never merged.
    """
    if not text:
        return ""
    text = TAG_PATTERN.sub(" ", text)
    text = text.translate(APOSTROPHES)
    text = DISALLOWED_PATTERN.sub(" ", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def clean(articles: list[Article]) -> list[CleanedArticle]:
    """Normalize the body text of every article."""
    if not articles:
        logger.warning("No articles to clean")
        return []

    logger.info("Cleaning %d articles", len(articles))

    results = []
    for article in articles:
        results.append(
            CleanedArticle(
                id=article.id,
                section_name=article.section_name,
                published_at=article.published_at,
                byline=article.byline,
                body_text=article.body_text,
                word_count=article.word_count,
                headline=article.headline,
                body_text_cleaned=normalize_text(article.body_text),
            )
        )

    empty = sum(1 for result in results if not result.body_text_cleaned)
    if empty:
        logger.warning("%d articles have no text after cleaning", empty)

    logger.info("Cleaned %d articles", len(results))
    return results
