from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from truthscore.config.settings import Settings
from truthscore.errors import ConfigurationError, NewsFetchError
from truthscore.models.types import Article

logger = logging.getLogger(__name__)


def _has_search_fields(payload: dict[str, Any]) -> bool:
    return bool(
        payload.get("title")
        and payload.get("description")
        and (payload.get("content") or payload.get("description"))
        and payload.get("url")
    )


def _has_headline_fields(payload: dict[str, Any]) -> bool:
    return bool(
        payload.get("title")
        and payload.get("description")
        and payload.get("urlToImage")
        and payload.get("url")
    )


class NewsFetcher:
    """NewsAPI client.

    Failures raise :class:`NewsFetchError`; a search that simply matches
    nothing returns an empty list.
    """

    def __init__(self, settings: Settings, session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._session = session

    def _ensure_api_key(self) -> None:
        if not self._settings.newsapi_key:
            raise ConfigurationError(
                "News API key is not configured. Please add NEWSAPI_KEY to "
                "your environment variables."
            )

    async def search(self, query: str, page_size: int = 20) -> list[Article]:
        self._ensure_api_key()
        payloads = await self._get(
            "everything",
            {
                "q": query,
                "language": "en",
                "sortBy": "publishedAt",
                "pageSize": page_size,
            },
        )
        articles = [Article.from_api(p) for p in payloads if _has_search_fields(p)]
        logger.info("News search for '%s' returned %d articles", query, len(articles))
        return articles

    async def top_headlines(self, country: str = "us", page_size: int = 50) -> list[Article]:
        self._ensure_api_key()
        payloads = await self._get(
            "top-headlines", {"country": country, "pageSize": page_size}
        )
        articles = [Article.from_api(p) for p in payloads if _has_headline_fields(p)]
        logger.info("Top headlines (%s) returned %d articles", country, len(articles))
        return articles

    async def _get(self, endpoint: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        url = f"{self._settings.newsapi_base_url}/{endpoint}"
        timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)
        try:
            async with self._session.get(
                url,
                params={**params, "apiKey": self._settings.newsapi_key},
                timeout=timeout,
            ) as response:
                if response.status >= 400:
                    raise NewsFetchError(
                        f"News API request failed: {response.status} {response.reason}"
                    )
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise NewsFetchError(f"News API request to {endpoint} failed: {exc}") from exc

        if not isinstance(data, dict) or data.get("status") != "ok":
            status = data.get("status") if isinstance(data, dict) else None
            raise NewsFetchError(f"News API error: {status}")

        return [a for a in data.get("articles") or [] if isinstance(a, dict)]
