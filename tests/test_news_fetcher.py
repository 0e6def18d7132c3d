"""Tests for the NewsAPI client."""
from __future__ import annotations

import asyncio
import dataclasses

import aiohttp
import pytest

from truthscore.errors import ConfigurationError, NewsFetchError
from truthscore.fetchers.news_fetcher import NewsFetcher


def _payload(**overrides) -> dict:
    payload = {
        "source": {"id": "reuters", "name": "Reuters"},
        "title": "Bridge collapse inquiry opens",
        "description": "An inquiry began on Tuesday.",
        "content": "Full text...",
        "url": "https://reuters.test/a",
        "urlToImage": "https://reuters.test/a.jpg",
        "publishedAt": "2025-03-04T07:30:00Z",
    }
    payload.update(overrides)
    return payload


class TestSearch:
    def test_returns_articles(self, test_settings, make_session, make_response):
        session = make_session(
            [make_response(200, {"status": "ok", "articles": [_payload(), _payload(url="https://reuters.test/b")]})]
        )
        articles = asyncio.run(NewsFetcher(test_settings, session).search("bridge collapse", 15))

        assert [a.url for a in articles] == ["https://reuters.test/a", "https://reuters.test/b"]
        assert articles[0].source_name == "Reuters"
        method, url, kwargs = session.calls[0]
        assert url == "https://newsapi.test/v2/everything"
        assert kwargs["params"]["q"] == "bridge collapse"
        assert kwargs["params"]["pageSize"] == 15
        assert kwargs["params"]["language"] == "en"
        assert kwargs["params"]["sortBy"] == "publishedAt"
        assert kwargs["params"]["apiKey"] == "test-news-key"

    def test_drops_incomplete_articles(self, test_settings, make_session, make_response):
        articles_payload = [
            _payload(title=None),
            _payload(description=""),
            _payload(url=None),
            _payload(urlToImage=None),
        ]
        session = make_session([make_response(200, {"status": "ok", "articles": articles_payload})])
        articles = asyncio.run(NewsFetcher(test_settings, session).search("bridge"))
        assert len(articles) == 1
        assert articles[0].image_url is None

    def test_zero_hits_is_empty_list(self, test_settings, make_session, make_response):
        session = make_session([make_response(200, {"status": "ok", "totalResults": 0, "articles": []})])
        assert asyncio.run(NewsFetcher(test_settings, session).search("nothing")) == []

    def test_http_error(self, test_settings, make_session, make_response):
        session = make_session([make_response(429, {"status": "error"}, reason="Too Many Requests")])
        with pytest.raises(NewsFetchError, match="429"):
            asyncio.run(NewsFetcher(test_settings, session).search("bridge"))

    def test_api_status_error(self, test_settings, make_session, make_response):
        session = make_session([make_response(200, {"status": "error", "code": "apiKeyInvalid"})])
        with pytest.raises(NewsFetchError, match="error"):
            asyncio.run(NewsFetcher(test_settings, session).search("bridge"))

    def test_network_error(self, test_settings, make_session):
        session = make_session([aiohttp.ClientConnectionError("dns")])
        with pytest.raises(NewsFetchError):
            asyncio.run(NewsFetcher(test_settings, session).search("bridge"))

    def test_timeout(self, test_settings, make_session):
        session = make_session([asyncio.TimeoutError()])
        with pytest.raises(NewsFetchError):
            asyncio.run(NewsFetcher(test_settings, session).search("bridge"))

    def test_missing_key(self, test_settings, make_session):
        settings = dataclasses.replace(test_settings, newsapi_key="")
        session = make_session([])
        with pytest.raises(ConfigurationError):
            asyncio.run(NewsFetcher(settings, session).search("bridge"))
        assert session.calls == []


class TestTopHeadlines:
    def test_requires_image(self, test_settings, make_session, make_response):
        session = make_session(
            [make_response(200, {"status": "ok", "articles": [_payload(), _payload(urlToImage=None)]})]
        )
        articles = asyncio.run(NewsFetcher(test_settings, session).top_headlines("gb", 10))

        assert len(articles) == 1
        _, url, kwargs = session.calls[0]
        assert url == "https://newsapi.test/v2/top-headlines"
        assert kwargs["params"]["country"] == "gb"
        assert kwargs["params"]["pageSize"] == 10
