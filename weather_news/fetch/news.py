"""Headline client for a NewsAPI-style top-headlines endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import FetchConfig, NewsApiConfig
from ..core.errors import FetchError, ParseError
from ..core.types import DEFAULT_CATEGORY, NewsArticle
from ..logging_utils import log_event
from .http import get_json

logger = logging.getLogger(__name__)


class NewsClient:
    """Fetches top headlines for a category.

    Never raises for upstream failures: any fetch or decode error is logged
    and an empty list is returned, so classification runs on an empty set.
    """

    def __init__(
        self,
        cfg: NewsApiConfig,
        fetch_cfg: FetchConfig,
        api_key: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cfg = cfg
        self.fetch_cfg = fetch_cfg
        self.api_key = api_key
        self.transport = transport

    async def fetch_headlines(
        self,
        category: str | None,
        page_size: int | None = None,
    ) -> list[NewsArticle]:
        category = category or DEFAULT_CATEGORY
        if not self.api_key:
            log_event(
                logger,
                "News API key missing, skipping headlines",
                level=logging.WARNING,
                event="news_degraded",
                category=category,
                error="missing_api_key",
            )
            return []

        url = f"{self.cfg.base_url.rstrip('/')}/top-headlines"
        params = {
            "category": category,
            "country": self.cfg.country,
            "apiKey": self.api_key,
            "pageSize": page_size or self.cfg.page_size,
        }
        try:
            data = await get_json(
                url, params, self.fetch_cfg, service="News", transport=self.transport
            )
            articles = parse_articles(data)
        except FetchError as exc:
            log_event(
                logger,
                "Headlines unavailable",
                level=logging.WARNING,
                event="news_degraded",
                category=category,
                error=str(exc),
            )
            return []

        logger.info("News data received: %d articles for %s", len(articles), category)
        return articles


def parse_articles(data: Any) -> list[NewsArticle]:
    """Decode a top-headlines payload into NewsArticle objects."""
    try:
        if data.get("status") == "error":
            raise ParseError(f"News API returned an error: {data.get('message', 'unknown')}")
        # Null or malformed entries are dropped, the rest of the batch is kept
        return [
            _parse_article(item)
            for item in data.get("articles") or []
            if isinstance(item, dict)
        ]
    except (KeyError, TypeError, AttributeError) as exc:
        raise ParseError(f"Unexpected news payload: {type(exc).__name__}: {exc}") from exc


def _parse_article(item: dict[str, Any]) -> NewsArticle:
    source = item.get("source")
    if not isinstance(source, dict):
        source = {}
    return NewsArticle(
        title=_optional_str(item.get("title")),
        description=_optional_str(item.get("description")),
        source_name=str(source.get("name") or ""),
        published_at=str(item.get("publishedAt") or ""),
        url=str(item.get("url") or ""),
        image_url=_optional_str(item.get("urlToImage")),
    )


def _optional_str(value: Any) -> str | None:
    return str(value) if value else None
