"""Tests for fetch_articles.snapshot module."""

import csv
from datetime import datetime, timezone

import pytest

from clean_articles.models import CleanedArticle
from common.errors import MalformedRecordError
from fetch_articles.snapshot import SNAPSHOT_COLUMNS, read_snapshot, row_to_article, write_snapshot


def _cleaned(article_id: str, byline: str | None = "Alex Hern") -> CleanedArticle:
    return CleanedArticle(
        id=article_id,
        section_name="Technology",
        published_at=datetime(2023, 1, 15, 9, 30, tzinfo=timezone.utc),
        byline=byline,
        body_text="<p>ChatGPT, again!</p>",
        word_count=2,
        headline="ChatGPT again",
        body_text_cleaned="ChatGPT again",
    )


class TestWriteSnapshot:
    def test_csv_columns_are_article_fields_plus_cleaned_text(self, tmp_path) -> None:
        path = write_snapshot([_cleaned("a1")], tmp_path / "snapshot.csv")

        with path.open(newline="") as f:
            reader = csv.DictReader(f)
            rows = list(reader)
        assert reader.fieldnames == SNAPSHOT_COLUMNS
        assert rows[0]["body_text_cleaned"] == "ChatGPT again"
        assert rows[0]["published_at"] == "2023-01-15T09:30:00+00:00"


class TestReadSnapshot:
    def test_csv_preserves_articles(self, tmp_path) -> None:
        path = write_snapshot([_cleaned("a1"), _cleaned("a2", byline=None)], tmp_path / "snapshot.csv")

        articles = read_snapshot(path)

        assert [a.id for a in articles] == ["a1", "a2"]
        assert articles[0].published_at == datetime(2023, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert articles[0].body_text == "<p>ChatGPT, again!</p>"
        assert articles[0].word_count == 2
        assert articles[1].byline is None

    def test_parquet_preserves_articles(self, tmp_path) -> None:
        path = write_snapshot([_cleaned("a1")], tmp_path / "snapshot.parquet")

        articles = read_snapshot(path)

        assert len(articles) == 1
        assert articles[0].section_name == "Technology"
        assert articles[0].headline == "ChatGPT again"

    def test_skips_rows_missing_required_columns(self, tmp_path) -> None:
        path = tmp_path / "snapshot.csv"
        with path.open("w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=SNAPSHOT_COLUMNS)
            writer.writeheader()
            writer.writerow({"id": "a1", "section_name": "", "published_at": "2023-01-15T00:00:00Z", "body_text": "x"})
            writer.writerow({"id": "a2", "section_name": "Business", "published_at": "2023-01-15T00:00:00Z", "body_text": "y"})

        articles = read_snapshot(path)

        assert [a.id for a in articles] == ["a2"]


class TestRowToArticle:
    def test_missing_published_at_raises(self) -> None:
        with pytest.raises(MalformedRecordError, match="published_at"):
            row_to_article({"id": "a1", "section_name": "Technology", "body_text": "x"})

    def test_bad_word_count_falls_back(self) -> None:
        article = row_to_article(
            {
                "id": "a1",
                "section_name": "Technology",
                "published_at": "2023-01-15T00:00:00Z",
                "body_text": "three word body",
                "word_count": "",
            }
        )
        assert article.word_count == 3
