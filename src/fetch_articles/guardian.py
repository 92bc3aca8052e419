"""Guardian content API client (the report's corpus source)."""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any

import requests

from common.config import GuardianConfig
from common.datetime import parse_datetime
from common.errors import (
    ConfigError,
    FetchError,
    MalformedRecordError,
    RateLimitError,
    TransientNetworkError,
)
from common.utils import is_blank
from fetch_articles.models import Article

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search"
SHOW_FIELDS = "headline,byline,bodyText,wordcount"
USER_AGENT = "ai-coverage-report/1.0"


def _parse_word_count(value: Any, body_text: str) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return len(body_text.split())
    return count if count >= 0 else len(body_text.split())


def parse_article(item: dict[str, Any]) -> Article:
    """
    Convert one item of a search response into an Article.

    Raises:
        MalformedRecordError: If id, sectionName, webPublicationDate or
            fields.bodyText is missing, or the publication date is unparseable.
    """
    fields = item.get("fields") or {}
    article_id = item.get("id")
    section_name = item.get("sectionName")
    published = item.get("webPublicationDate")
    body_text = fields.get("bodyText")

    missing = [
        name
        for name, value in (
            ("id", article_id),
            ("sectionName", section_name),
            ("webPublicationDate", published),
        )
        if is_blank(value)
    ]
    if body_text is None:
        missing.append("fields.bodyText")
    if missing:
        raise MalformedRecordError(
            f"Article {article_id or '<unknown>'} missing required fields: {', '.join(missing)}"
        )

    try:
        published_at = parse_datetime(published)
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(
            f"Article {article_id} has invalid webPublicationDate: {published!r}"
        ) from exc

    byline = fields.get("byline")
    headline = fields.get("headline") or item.get("webTitle")

    return Article(
        id=str(article_id),
        section_name=str(section_name),
        published_at=published_at,
        byline=None if is_blank(byline) else str(byline).strip(),
        body_text=str(body_text),
        word_count=_parse_word_count(fields.get("wordcount"), str(body_text)),
        headline=headline,
    )


class GuardianContentSource:
    """
    Query the Guardian content API search endpoint.

    Pagination is handled here; callers receive a flattened list of articles.
    Rate-limit and transient failures are retried with exponential backoff
    up to `config.max_retries` times, after which the last error propagates.
    """

    def __init__(self, config: GuardianConfig, session: requests.Session | None = None):
        if not config.api_key:
            raise ConfigError("Guardian API key is required (set GUARDIAN_API_KEY or --api-key)")
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, query: str, from_date: date, to_date: date) -> list[Article]:
        """Fetch all articles matching `query` published between the two dates (inclusive)."""
        logger.info("Fetching articles for %r from %s to %s", query, from_date, to_date)

        articles: list[Article] = []
        skipped = 0
        page = 1
        pages = 1

        while page <= pages:
            payload = self._get_page(query, from_date, to_date, page)
            response = payload.get("response") or {}
            if response.get("status") != "ok":
                raise FetchError(
                    f"Content API returned status {response.get('status')!r}: "
                    f"{response.get('message', 'no message')}"
                )

            pages = int(response.get("pages") or 0)
            if self.config.max_pages is not None:
                pages = min(pages, self.config.max_pages)

            results = response.get("results") or []
            logger.info("Page %d/%d: %d results", page, pages, len(results))
            for item in results:
                try:
                    articles.append(parse_article(item))
                except MalformedRecordError as exc:
                    skipped += 1
                    logger.warning("Skipping malformed record: %s", exc)

            page += 1

        if skipped:
            logger.warning("Skipped %d malformed records", skipped)
        logger.info("Fetched %d articles", len(articles))
        return articles

    def _get_page(self, query: str, from_date: date, to_date: date, page: int) -> dict[str, Any]:
        params = {
            "q": query,
            "from-date": from_date.isoformat(),
            "to-date": to_date.isoformat(),
            "page": page,
            "page-size": self.config.page_size,
            "order-by": "oldest",
            "show-fields": SHOW_FIELDS,
            "api-key": self.config.api_key,
        }

        for attempt in range(self.config.max_retries + 1):
            try:
                return self._request(params)
            except (RateLimitError, TransientNetworkError) as exc:
                if attempt == self.config.max_retries:
                    logger.error("Page %d failed after %d attempts: %s", page, attempt + 1, exc)
                    raise
                delay = self.config.backoff_base * 2 ** attempt
                retry_after = exc.retry_after if isinstance(exc, RateLimitError) else None
                if retry_after is not None:
                    delay = max(delay, retry_after)
                logger.warning(
                    "Page %d attempt %d failed (%s), retrying in %.1fs",
                    page,
                    attempt + 1,
                    exc,
                    delay,
                )
                time.sleep(delay)

        raise FetchError(f"Page {page} could not be fetched")

    def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        url = self.config.base_url.rstrip("/") + SEARCH_PATH
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise TransientNetworkError(f"Request to {url} failed: {exc}") from exc
        except requests.RequestException as exc:
            raise FetchError(f"Request to {url} failed: {exc}") from exc

        status = response.status_code
        if status == 429:
            raise RateLimitError(
                f"Rate limited by {url}",
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )
        if status >= 500:
            raise TransientNetworkError(f"{url} returned HTTP {status}")
        if status in (401, 403):
            raise FetchError(f"{url} rejected the API key (HTTP {status})")
        if status >= 400:
            raise FetchError(f"{url} returned HTTP {status}")

        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(f"{url} returned invalid JSON") from exc


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return None
