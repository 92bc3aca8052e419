"""Roll document sentiment up by day, topic, author and section."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Any, Callable, Hashable, Iterable

from aggregate_sentiment.models import SummaryRow, SummaryTables
from common.datetime import utc_date
from common.utils import get_value, is_blank
from fit_topics.models import DocumentTopic
from score_sentiment.models import SentimentScore

logger = logging.getLogger(__name__)


def _sorted_scores(scores: Iterable[SentimentScore]) -> list[SentimentScore]:
    return sorted(scores, key=lambda s: (s.document_id, s.published_at))


def summarize(pairs: Iterable[tuple[Hashable, float]]) -> tuple[SummaryRow, ...]:
    """Group (key, score) pairs into SummaryRows sorted by key."""
    groups: dict[Any, list[float]] = defaultdict(list)
    for key, score in pairs:
        groups[key].append(score)

    return tuple(
        SummaryRow(key=key, mean_sentiment=math.fsum(values) / len(values), count=len(values))
        for key, values in sorted(groups.items(), key=lambda item: item[0])
    )


def inner_join(
    scores: Iterable[SentimentScore],
    right: dict[str, Any],
    label: str,
) -> list[tuple[SentimentScore, Any]]:
    """
    Join scores to `right` by document id, dropping unmatched documents.

    Unmatched documents on either side are reported with a warning.
    """
    scores = _sorted_scores(scores)
    joined = [(score, right[score.document_id]) for score in scores if score.document_id in right]

    score_ids = {score.document_id for score in scores}
    missing_right = len(score_ids - right.keys())
    missing_left = len(right.keys() - score_ids)
    if missing_right or missing_left:
        logger.warning(
            "Join with %s dropped %d scored documents without %s and %d %s rows without a score",
            label,
            missing_right,
            label,
            missing_left,
            label,
        )
    return joined


def summarize_by_topic(
    scores: Iterable[SentimentScore],
    topics: Iterable[DocumentTopic],
) -> tuple[SummaryRow, ...]:
    """Mean sentiment per dominant topic."""
    topic_by_id = {topic.document_id: topic.dominant_topic for topic in topics}
    joined = inner_join(scores, topic_by_id, "topics")
    return summarize((topic, score.score) for score, topic in joined)


def _summarize_by_field(
    scores: Iterable[SentimentScore],
    articles: Iterable[Any],
    field_name: str,
    normalize: Callable[[Any], Any] = lambda v: v,
) -> tuple[SummaryRow, ...]:
    metadata = {get_value(article, "id"): article for article in articles}
    joined = inner_join(scores, metadata, "article metadata")

    pairs = []
    excluded = 0
    for score, article in joined:
        value = get_value(article, field_name)
        if is_blank(value):
            excluded += 1
            continue
        pairs.append((normalize(value), score.score))

    if excluded:
        logger.info("%d documents have no %s and are excluded from that grouping", excluded, field_name)
    return summarize(pairs)


def summarize_by_day(scores: Iterable[SentimentScore], articles: Iterable[Any]) -> tuple[SummaryRow, ...]:
    """Mean sentiment per UTC publication date of the joined article."""
    return _summarize_by_field(scores, articles, "published_at", normalize=utc_date)


def summarize_by_author(scores: Iterable[SentimentScore], articles: Iterable[Any]) -> tuple[SummaryRow, ...]:
    """Mean sentiment per byline; documents without a byline are excluded."""
    return _summarize_by_field(scores, articles, "byline", normalize=lambda v: str(v).strip())


def summarize_by_section(scores: Iterable[SentimentScore], articles: Iterable[Any]) -> tuple[SummaryRow, ...]:
    """Mean sentiment per publication section."""
    return _summarize_by_field(scores, articles, "section_name", normalize=lambda v: str(v).strip())


def aggregate(
    scores: Iterable[SentimentScore],
    topics: Iterable[DocumentTopic],
    articles: Iterable[Any],
) -> SummaryTables:
    """
    Build the four summary tables.

    Args:
        scores: Per-document sentiment scores.
        topics: Per-document dominant topics.
        articles: Article metadata records (id, published_at, byline, section_name).

    Returns:
        SummaryTables with rows sorted by key.
    """
    scores = _sorted_scores(scores)
    topics = list(topics)
    articles = list(articles)

    tables = SummaryTables(
        by_day=summarize_by_day(scores, articles),
        by_topic=summarize_by_topic(scores, topics),
        by_author=summarize_by_author(scores, articles),
        by_section=summarize_by_section(scores, articles),
    )
    logger.info(
        "Aggregated %d scores: %d days, %d topics, %d authors, %d sections",
        len(scores),
        len(tables.by_day),
        len(tables.by_topic),
        len(tables.by_author),
        len(tables.by_section),
    )
    return tables
