"""Tests for fetch_articles.guardian module."""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests

from common.config import GuardianConfig
from common.errors import (
    ConfigError,
    FetchError,
    MalformedRecordError,
    RateLimitError,
    TransientNetworkError,
)
from fetch_articles.guardian import GuardianContentSource, parse_article


def _item(article_id: str, **overrides) -> dict:
    item = {
        "id": article_id,
        "sectionName": "Technology",
        "webPublicationDate": "2023-01-15T09:30:00Z",
        "webTitle": "Web title",
        "fields": {
            "headline": "ChatGPT passes exam",
            "byline": "Alex Hern",
            "bodyText": "ChatGPT passed the exam with great results.",
            "wordcount": "7",
        },
    }
    item.update(overrides)
    return item


def _response(status_code: int = 200, payload: dict | None = None, headers: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = payload
    return response


def _page(results: list[dict], pages: int = 1) -> dict:
    return {"response": {"status": "ok", "pages": pages, "results": results}}


def _source(session: MagicMock, **config) -> GuardianContentSource:
    config.setdefault("api_key", "test-key")
    config.setdefault("backoff_base", 0.5)
    return GuardianContentSource(GuardianConfig(**config), session=session)


class TestParseArticle:
    def test_maps_fields(self) -> None:
        article = parse_article(_item("technology/2023/jan/15/chatgpt"))

        assert article.id == "technology/2023/jan/15/chatgpt"
        assert article.section_name == "Technology"
        assert article.published_at == datetime(2023, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert article.byline == "Alex Hern"
        assert article.headline == "ChatGPT passes exam"
        assert article.word_count == 7

    def test_missing_byline_is_none(self) -> None:
        item = _item("a1")
        item["fields"]["byline"] = "  "
        assert parse_article(item).byline is None

    def test_word_count_falls_back_to_body(self) -> None:
        item = _item("a1")
        del item["fields"]["wordcount"]
        assert parse_article(item).word_count == 7

    def test_missing_body_raises(self) -> None:
        item = _item("a1")
        del item["fields"]["bodyText"]
        with pytest.raises(MalformedRecordError, match="bodyText"):
            parse_article(item)

    def test_missing_section_raises(self) -> None:
        with pytest.raises(MalformedRecordError, match="sectionName"):
            parse_article(_item("a1", sectionName=None))

    def test_invalid_date_raises(self) -> None:
        with pytest.raises(MalformedRecordError, match="webPublicationDate"):
            parse_article(_item("a1", webPublicationDate="not a date"))


class TestGuardianContentSource:
    def test_requires_api_key(self) -> None:
        with pytest.raises(ConfigError):
            GuardianContentSource(GuardianConfig(api_key=None), session=MagicMock())

    def test_follows_pagination(self) -> None:
        session = MagicMock()
        session.get.side_effect = [
            _response(payload=_page([_item("a1"), _item("a2")], pages=2)),
            _response(payload=_page([_item("a3")], pages=2)),
        ]

        articles = _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        assert [a.id for a in articles] == ["a1", "a2", "a3"]
        assert session.get.call_count == 2
        params = session.get.call_args_list[1].kwargs["params"]
        assert params["page"] == 2
        assert params["q"] == "ChatGPT"
        assert params["from-date"] == "2023-01-01"
        assert params["to-date"] == "2023-01-31"
        assert params["api-key"] == "test-key"
        assert session.get.call_args_list[1].kwargs["timeout"] == 30.0

    def test_max_pages_limits_requests(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(payload=_page([_item("a1")], pages=10))

        articles = _source(session, max_pages=1).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        assert len(articles) == 1
        assert session.get.call_count == 1

    def test_skips_malformed_records(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(
            payload=_page([_item("a1"), _item("bad", sectionName=""), _item("a2")])
        )

        articles = _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        assert [a.id for a in articles] == ["a1", "a2"]

    def test_empty_result(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(payload={"response": {"status": "ok", "pages": 0, "results": []}})

        assert _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 2)) == []

    @patch("fetch_articles.guardian.time")
    def test_retries_transient_errors_with_backoff(self, mock_time) -> None:
        session = MagicMock()
        session.get.side_effect = [
            requests.ConnectionError("reset"),
            _response(status_code=503),
            _response(payload=_page([_item("a1")])),
        ]

        articles = _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        assert len(articles) == 1
        assert [c.args[0] for c in mock_time.sleep.call_args_list] == [0.5, 1.0]

    @patch("fetch_articles.guardian.time")
    def test_rate_limit_honours_retry_after(self, mock_time) -> None:
        session = MagicMock()
        session.get.side_effect = [
            _response(status_code=429, headers={"Retry-After": "5"}),
            _response(payload=_page([_item("a1")])),
        ]

        _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        mock_time.sleep.assert_called_once_with(5.0)

    @patch("fetch_articles.guardian.time")
    def test_raises_after_retry_budget(self, mock_time) -> None:
        session = MagicMock()
        session.get.return_value = _response(status_code=429)

        with pytest.raises(RateLimitError):
            _source(session, max_retries=2).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        assert session.get.call_count == 3
        assert mock_time.sleep.call_count == 2

    @patch("fetch_articles.guardian.time")
    def test_timeout_is_transient(self, mock_time) -> None:
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(TransientNetworkError):
            _source(session, max_retries=0).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        mock_time.sleep.assert_not_called()

    @patch("fetch_articles.guardian.time")
    def test_auth_failure_is_not_retried(self, mock_time) -> None:
        session = MagicMock()
        session.get.return_value = _response(status_code=401)

        with pytest.raises(FetchError, match="API key"):
            _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))

        assert session.get.call_count == 1
        mock_time.sleep.assert_not_called()

    def test_error_status_in_body_raises(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(
            payload={"response": {"status": "error", "message": "Invalid date"}}
        )

        with pytest.raises(FetchError, match="Invalid date"):
            _source(session).fetch("ChatGPT", date(2023, 1, 1), date(2023, 1, 31))
