"""Compose the report pipeline: fetch, clean, tokenize, model topics, score, aggregate."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Protocol

from aggregate_sentiment.aggregate import aggregate
from clean_articles.clean import clean
from common.config import ReportConfig
from common.errors import InsufficientDataError
from common.local_io import save_csv_records_local, save_jsonl_records_local
from fetch_articles.guardian import GuardianContentSource
from fetch_articles.models import Article
from fetch_articles.snapshot import read_snapshot, write_snapshot
from fit_topics.fit_topics import fit_topic_model
from run_report.charts import render_report_charts
from run_report.models import ReportResult
from score_sentiment.score_sentiment import score_articles, validate_method, word_contributions
from term_frequency.term_frequency import build_document_term_matrix
from tokenize_articles.stopwords import load_stopwords
from tokenize_articles.tokenize import query_terms, tokenize_articles, word_frequencies

logger = logging.getLogger(__name__)


class CorpusSource(Protocol):
    def fetch(self, query: str, from_date: date, to_date: date) -> list[Article]: ...


def deduplicate_articles(articles: list[Article]) -> list[Article]:
    """Keep the first article for each id, in input order."""
    seen: set[str] = set()
    unique = []
    for article in articles:
        if article.id in seen:
            continue
        seen.add(article.id)
        unique.append(article)

    dropped = len(articles) - len(unique)
    if dropped:
        logger.warning("Dropped %d duplicate articles", dropped)
    return unique


def build_stopwords(config: ReportConfig) -> frozenset[str]:
    """Stopwords from config, plus the query's own words when configured."""
    extra = list(config.tokenize.extra_stopwords)
    if config.tokenize.exclude_query_terms:
        extra.extend(query_terms(config.query))
    return load_stopwords(
        base=config.tokenize.stopwords_base,
        path=config.tokenize.stopwords_file,
        extra=extra,
    )


def load_articles(
    config: ReportConfig,
    source: CorpusSource | None = None,
) -> tuple[list[Article], bool]:
    """
    Read articles from the snapshot when requested and present, otherwise fetch.

    Returns:
        (articles, from_snapshot)
    """
    snapshot_path = Path(config.output.snapshot_path)
    if config.output.use_snapshot:
        if snapshot_path.exists():
            return read_snapshot(snapshot_path), True
        logger.warning("Snapshot %s not found, fetching from the content API", snapshot_path)

    if source is None:
        source = GuardianContentSource(config.guardian)
    to_date = config.to_date or datetime.now(timezone.utc).date()
    return source.fetch(config.query, config.from_date, to_date), False


def analyze(articles: list[Article], config: ReportConfig) -> ReportResult:
    """Run the in-memory stages on fetched articles; repeated ids keep the first article."""
    if not articles:
        raise InsufficientDataError(f"No articles found for query {config.query!r}")

    cleaned = clean(deduplicate_articles(articles))

    stopwords = build_stopwords(config)
    token_records = list(tokenize_articles(cleaned, stopwords, config.tokenize.drop_numeric))
    logger.info("Tokenized %d articles into %d tokens", len(cleaned), len(token_records))

    dtm = build_document_term_matrix(token_records, document_ids=[article.id for article in cleaned])
    topic_model = fit_topic_model(
        dtm,
        n_topics=config.topics.n_topics,
        seed=config.topics.seed,
        max_iter=config.topics.max_iter,
    )
    document_topics = topic_model.document_topics()

    scores = score_articles(cleaned, config.sentiment.method)
    tables = aggregate(scores, document_topics, cleaned)

    return ReportResult(
        articles=tuple(cleaned),
        token_count=len(token_records),
        document_term_matrix=dtm,
        topic_model=topic_model,
        document_topics=tuple(document_topics),
        scores=tuple(scores),
        tables=tables,
        top_terms=tuple(topic_model.top_terms(config.topics.top_terms)),
        word_frequencies=tuple(word_frequencies(token_records, config.output.top_words)),
        word_contributions=tuple(word_contributions(token_records, config.output.top_words)),
    )


def write_outputs(result: ReportResult, output_dir: str | Path) -> list[Path]:
    """Write summary tables and per-document results under output_dir."""
    tables = result.tables
    return [
        save_csv_records_local(list(tables.by_day), "sentiment_by_day", output_dir),
        save_csv_records_local(list(tables.by_topic), "sentiment_by_topic", output_dir),
        save_csv_records_local(list(tables.by_author), "sentiment_by_author", output_dir),
        save_csv_records_local(list(tables.by_section), "sentiment_by_section", output_dir),
        save_csv_records_local(list(result.document_topics), "document_topics", output_dir),
        save_csv_records_local(list(result.top_terms), "topic_terms", output_dir),
        save_csv_records_local(list(result.word_frequencies), "word_frequencies", output_dir),
        save_csv_records_local(list(result.word_contributions), "word_contributions", output_dir),
        save_jsonl_records_local(list(result.scores), "sentiment_scores", output_dir),
    ]


def run_report(
    config: ReportConfig,
    source: CorpusSource | None = None,
    render: bool = True,
) -> ReportResult:
    """
    Run the whole report.

    Args:
        config: Report configuration.
        source: Corpus source; defaults to the Guardian content API.
        render: Whether to render charts.

    Returns:
        ReportResult including the paths of written files.

    Raises:
        UnsupportedMethodError: Unknown sentiment method (checked before fetching).
        FetchError: The content API could not be queried.
        InsufficientDataError: No articles, or the topic model cannot be fit.
    """
    validate_method(config.sentiment.method)

    articles, from_snapshot = load_articles(config, source)
    articles = deduplicate_articles(articles)

    # Snapshot the fetch before any analysis stage can fail
    if articles and not from_snapshot:
        write_snapshot(clean(articles), config.output.snapshot_path)

    result = analyze(articles, config)

    output_files = write_outputs(result, config.output.output_dir)
    chart_files: list[Path] = []
    if render:
        chart_files = render_report_charts(
            result,
            Path(config.output.output_dir) / "charts",
            interactive=config.output.interactive,
            top_authors=config.output.top_authors,
        )

    logger.info(
        "Report complete: %d articles, %d output files, %d charts",
        len(result.articles),
        len(output_files),
        len(chart_files),
    )
    return dataclasses.replace(result, output_files=tuple(output_files), chart_files=tuple(chart_files))
