"""Standard chart set for a report run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from render_charts.models import ChartSpec
from render_charts.render import render_chart
from run_report.models import ReportResult

logger = logging.getLogger(__name__)


def _render_if_rows(
    rows: Sequence[Any],
    spec: ChartSpec,
    path: Path,
    interactive: bool,
) -> Path | None:
    if not rows:
        logger.warning("No rows for chart %r, skipping", spec.title)
        return None
    return render_chart(rows, spec, path, interactive=interactive)


def render_report_charts(
    result: ReportResult,
    output_dir: str | Path,
    interactive: bool = False,
    top_authors: int = 15,
) -> list[Path]:
    """Render the report's charts into output_dir and return the written paths."""
    output_dir = Path(output_dir)
    tables = result.tables

    # Most prolific authors first
    authors = sorted(tables.by_author, key=lambda row: (-row.count, row.key))[:top_authors]

    charts: list[tuple[Sequence[Any], ChartSpec, str]] = [
        (
            tables.by_day,
            ChartSpec("line", "key", "mean_sentiment", "Mean sentiment by day", "Date", "Mean sentiment"),
            "sentiment_by_day",
        ),
        (
            tables.by_day,
            ChartSpec("line", "key", "count", "Articles per day", "Date", "Articles"),
            "articles_by_day",
        ),
        (
            tables.by_topic,
            ChartSpec("bar", "key", "mean_sentiment", "Mean sentiment by topic", "Topic", "Mean sentiment"),
            "sentiment_by_topic",
        ),
        (
            tables.by_section,
            ChartSpec("bar", "key", "mean_sentiment", "Mean sentiment by section", "Section", "Mean sentiment"),
            "sentiment_by_section",
        ),
        (
            authors,
            ChartSpec("bar", "key", "mean_sentiment", "Mean sentiment by author", "Author", "Mean sentiment"),
            "sentiment_by_author",
        ),
        (
            result.scores,
            ChartSpec("scatter", "published_at", "score", "Article sentiment over time", "Published", "Sentiment"),
            "document_sentiment",
        ),
        (
            result.word_frequencies,
            ChartSpec("bar", "word", "count", "Most frequent words", "Word", "Occurrences"),
            "word_frequencies",
        ),
        (
            result.word_contributions,
            ChartSpec("bar", "word", "contribution", "Words driving sentiment", "Word", "Contribution"),
            "word_contributions",
        ),
    ]

    for topic in range(result.topic_model.n_topics):
        terms = [term for term in result.top_terms if term.topic == topic]
        charts.append(
            (
                terms,
                ChartSpec("bar", "term", "weight", f"Topic {topic}: top terms", "Term", "Weight"),
                f"topic_{topic}_terms",
            )
        )

    paths = []
    for rows, spec, name in charts:
        path = _render_if_rows(rows, spec, output_dir / name, interactive)
        if path is not None:
            paths.append(path)

    logger.info("Rendered %d charts to %s", len(paths), output_dir)
    return paths
