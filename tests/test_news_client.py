"""Tests for the headline client."""

from __future__ import annotations

import asyncio

import httpx

from weather_news.config import FetchConfig, NewsApiConfig
from weather_news.core.types import NewsArticle
from weather_news.fetch.news import NewsClient, parse_articles

PAYLOAD = {
    "status": "ok",
    "articles": [
        {
            "title": "Team wins the cup",
            "description": "A thrilling final",
            "source": {"id": None, "name": "Sports Daily"},
            "publishedAt": "2026-10-19T08:00:00Z",
            "url": "https://example.com/cup",
            "urlToImage": "https://example.com/cup.jpg",
        },
        {
            "title": None,
            "description": None,
            "source": {"name": "Wire"},
            "publishedAt": "2026-10-19T07:00:00Z",
            "url": "https://example.com/untitled",
            "urlToImage": None,
        },
    ],
}


def _client(handler, api_key="news-key"):
    return NewsClient(
        NewsApiConfig(base_url="https://news.test/v2"),
        FetchConfig(retries=0),
        api_key,
        transport=httpx.MockTransport(handler),
    )


def test_fetch_headlines_sends_category_country_and_page_size():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=PAYLOAD)

    articles = asyncio.run(_client(handler).fetch_headlines("sports"))

    assert seen["path"] == "/v2/top-headlines"
    assert seen["params"] == {
        "category": "sports",
        "country": "us",
        "apiKey": "news-key",
        "pageSize": "50",
    }
    assert articles[0] == NewsArticle(
        title="Team wins the cup",
        description="A thrilling final",
        source_name="Sports Daily",
        published_at="2026-10-19T08:00:00Z",
        url="https://example.com/cup",
        image_url="https://example.com/cup.jpg",
    )
    assert articles[1].title is None
    assert articles[1].image_url is None


def test_missing_category_defaults_to_general():
    seen = {}

    def handler(request):
        seen["category"] = request.url.params["category"]
        return httpx.Response(200, json={"status": "ok", "articles": []})

    asyncio.run(_client(handler).fetch_headlines(None))

    assert seen["category"] == "general"


def test_http_failure_returns_empty_list():
    def handler(request):
        return httpx.Response(429, json={"status": "error", "code": "rateLimited"})

    assert asyncio.run(_client(handler).fetch_headlines("general")) == []


def test_network_failure_returns_empty_list():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    assert asyncio.run(_client(handler).fetch_headlines("general")) == []


def test_error_status_in_body_returns_empty_list():
    def handler(request):
        return httpx.Response(200, json={"status": "error", "message": "apiKeyInvalid"})

    assert asyncio.run(_client(handler).fetch_headlines("general")) == []


def test_missing_api_key_skips_request():
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=PAYLOAD)

    assert asyncio.run(_client(handler, api_key=None).fetch_headlines("general")) == []
    assert calls == 0


def test_parse_articles_handles_missing_articles_key():
    assert parse_articles({"status": "ok"}) == []


def test_null_and_malformed_entries_do_not_drop_the_batch():
    payload = {
        "status": "ok",
        "articles": [
            {"title": "Team wins final", "source": {"name": "Sports Daily"}, "url": "https://example.com/a"},
            None,
            "not an article",
            {"title": "Another headline", "source": "Wire", "url": "https://example.com/b"},
        ],
    }

    def handler(request):
        return httpx.Response(200, json=payload)

    articles = asyncio.run(_client(handler).fetch_headlines("sports"))

    assert [a.title for a in articles] == ["Team wins final", "Another headline"]
    assert articles[0].source_name == "Sports Daily"
    assert articles[1].source_name == ""
