"""Flat tabular snapshot of fetched articles, reused across runs as a cache."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from clean_articles.models import CleanedArticle
from common.datetime import parse_datetime
from common.errors import MalformedRecordError
from common.utils import is_blank
from fetch_articles.models import Article

logger = logging.getLogger(__name__)

SNAPSHOT_COLUMNS = [
    "id",
    "section_name",
    "published_at",
    "byline",
    "body_text",
    "word_count",
    "headline",
    "body_text_cleaned",
]

REQUIRED_COLUMNS = ("id", "section_name", "published_at")


def _to_row(article: CleanedArticle) -> dict[str, Any]:
    return {
        "id": article.id,
        "section_name": article.section_name,
        "published_at": article.published_at.isoformat(),
        "byline": article.byline or "",
        "body_text": article.body_text,
        "word_count": article.word_count,
        "headline": article.headline or "",
        "body_text_cleaned": article.body_text_cleaned,
    }


def row_to_article(row: dict[str, Any]) -> Article:
    """Build an Article from a snapshot row, validating required columns."""
    missing = [column for column in REQUIRED_COLUMNS if is_blank(row.get(column))]
    if row.get("body_text") is None:
        missing.append("body_text")
    if missing:
        raise MalformedRecordError(
            f"Snapshot row {row.get('id') or '<unknown>'} missing required columns: {', '.join(missing)}"
        )

    body_text = str(row["body_text"])
    try:
        published_at = parse_datetime(row["published_at"])
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(
            f"Snapshot row {row['id']} has invalid published_at: {row['published_at']!r}"
        ) from exc

    try:
        word_count = int(row.get("word_count"))
    except (TypeError, ValueError):
        word_count = len(body_text.split())

    byline = row.get("byline")
    headline = row.get("headline")
    return Article(
        id=str(row["id"]),
        section_name=str(row["section_name"]),
        published_at=published_at,
        byline=None if is_blank(byline) else str(byline),
        body_text=body_text,
        word_count=word_count,
        headline=None if is_blank(headline) else str(headline),
    )


def write_snapshot(articles: list[CleanedArticle], path: str | Path) -> Path:
    """Write articles to a CSV or Parquet snapshot, chosen by file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = [_to_row(article) for article in articles]

    if path.suffix == ".parquet":
        table = pa.Table.from_pylist(rows, schema=_parquet_schema())
        pq.write_table(table, path)
    else:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=SNAPSHOT_COLUMNS)
            writer.writeheader()
            writer.writerows(rows)

    logger.info("Wrote snapshot of %d articles to %s", len(rows), path)
    return path


def read_snapshot(path: str | Path) -> list[Article]:
    """
    Read articles back from a snapshot.

    Rows missing required columns are skipped with a warning. The stored
    body_text_cleaned column is ignored; cleaning is re-derived each run.
    """
    path = Path(path)
    if path.suffix == ".parquet":
        rows = pq.read_table(path).to_pylist()
    else:
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

    articles = []
    skipped = 0
    for row in rows:
        try:
            articles.append(row_to_article(row))
        except MalformedRecordError as exc:
            skipped += 1
            logger.warning("Skipping snapshot row: %s", exc)

    logger.info("Read %d articles from snapshot %s (%d skipped)", len(articles), path, skipped)
    return articles


def _parquet_schema() -> pa.Schema:
    return pa.schema(
        [
            ("id", pa.string()),
            ("section_name", pa.string()),
            ("published_at", pa.string()),
            ("byline", pa.string()),
            ("body_text", pa.string()),
            ("word_count", pa.int64()),
            ("headline", pa.string()),
            ("body_text_cleaned", pa.string()),
        ]
    )
