"""Lexicon-based sentiment scoring."""

import logging
from collections import Counter
from functools import lru_cache
from typing import Callable, Iterable

from textblob import TextBlob
from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from clean_articles.models import CleanedArticle
from common.errors import UnsupportedMethodError
from score_sentiment.models import SentimentScore, WordContribution
from tokenize_articles.models import TokenRecord
from tokenize_articles.tokenize import tokenize

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.0


@lru_cache(maxsize=1)
def _vader_analyzer() -> SentimentIntensityAnalyzer:
    return SentimentIntensityAnalyzer()


def vader_lexicon() -> dict[str, float]:
    """VADER word -> valence mapping."""
    return _vader_analyzer().lexicon


def _score_vader(text: str) -> float:
    return float(_vader_analyzer().polarity_scores(text)["compound"])


def _score_vader_sum(text: str) -> float:
    lexicon = vader_lexicon()
    return float(sum(lexicon.get(token, 0.0) for token in tokenize(text, frozenset())))


def _score_textblob(text: str) -> float:
    return float(TextBlob(text).sentiment.polarity)


SENTIMENT_METHODS: dict[str, Callable[[str], float]] = {
    # VADER compound score, normalized to [-1, 1]
    "vader": _score_vader,
    # Sum of VADER lexicon valences over recognized words, unbounded
    "vader_sum": _score_vader_sum,
    # Pattern lexicon polarity averaged by TextBlob, in [-1, 1]
    "textblob": _score_textblob,
}


def validate_method(method: str) -> None:
    """Raise UnsupportedMethodError for an unknown method name."""
    if method not in SENTIMENT_METHODS:
        raise UnsupportedMethodError(
            f"Unsupported sentiment method: {method}. Must be one of {sorted(SENTIMENT_METHODS)}"
        )


def score_text(text: str | None, method: str = "vader") -> float:
    """
    Score one text with the named lexicon method.

    Leading and trailing whitespace is ignored; empty or whitespace-only text
    scores exactly 0.
    """
    validate_method(method)
    text = (text or "").strip()
    if not text:
        return NEUTRAL_SCORE
    return SENTIMENT_METHODS[method](text)


def score_articles(articles: Iterable[CleanedArticle], method: str = "vader") -> list[SentimentScore]:
    """Score every article's cleaned body text, sorted by document id then date."""
    validate_method(method)

    results = [
        SentimentScore(
            document_id=article.id,
            published_at=article.published_at,
            score=score_text(article.body_text_cleaned, method),
            method=method,
        )
        for article in articles
    ]
    results.sort(key=lambda s: (s.document_id, s.published_at))

    logger.info("Scored %d articles with %s", len(results), method)
    return results


def word_contributions(records: Iterable[TokenRecord], n: int | None = 20) -> list[WordContribution]:
    """
    Words contributing most to corpus sentiment under the VADER lexicon.

    Contribution is occurrence count times lexicon valence; results are
    ordered by absolute contribution (ties by word).
    """
    lexicon = vader_lexicon()
    counts = Counter(record.word for record in records if record.word in lexicon)

    contributions = [
        WordContribution(
            word=word,
            count=count,
            valence=float(lexicon[word]),
            contribution=float(count * lexicon[word]),
        )
        for word, count in counts.items()
    ]
    contributions.sort(key=lambda c: (-abs(c.contribution), c.word))
    if n is not None:
        contributions = contributions[:n]
    return contributions
