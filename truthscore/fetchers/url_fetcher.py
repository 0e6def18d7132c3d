from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any
from urllib.parse import urlparse

import aiohttp
from bs4 import BeautifulSoup, Tag

from truthscore.config.settings import Settings
from truthscore.errors import ExtractionError
from truthscore.fetchers.utils import clean_text, extract_youtube_video_id
from truthscore.models.types import ScrapedPage

logger = logging.getLogger(__name__)

_HTTP_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; TruthScoreFetcher/1.0)"}

ARTICLE_SELECTORS = [
    "article",
    '[role="main"]',
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    "main p",
    ".story-body",
    ".article-body",
]

UNWANTED_SELECTORS = [
    "script",
    "style",
    "nav",
    "header",
    "footer",
    ".advertisement",
    ".ads",
    ".social-share",
    ".comments",
    ".related-articles",
]

MIN_ARTICLE_CHARS = 100
MIN_PARAGRAPH_CHARS = 50
MAX_PARAGRAPHS = 10
MAX_BODY_CHARS = 5000
MAX_CONTENT_CHARS = 8000
MAX_VIDEO_CONTENT_CHARS = 1000


def _meta(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content.strip() if content and content.strip() else None


def _element_text(element: Tag) -> str:
    clone = copy.copy(element)
    for selector in UNWANTED_SELECTORS:
        for unwanted in clone.select(selector):
            unwanted.decompose()
    return clone.get_text(" ")


def _main_text(soup: BeautifulSoup) -> str:
    content = ""
    for selector in ARTICLE_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            content = _element_text(element)
            if len(content.strip()) > MIN_ARTICLE_CHARS:
                break

    if len(content.strip()) <= MIN_ARTICLE_CHARS:
        paragraphs = [p.get_text().strip() for p in soup.find_all("p")]
        paragraphs = [p for p in paragraphs if len(p) > MIN_PARAGRAPH_CHARS]
        content = " ".join(paragraphs[:MAX_PARAGRAPHS])

    return clean_text(content)[:MAX_BODY_CHARS]


def extract_page(html: str, url: str) -> ScrapedPage:
    """Pull title, description, site name, author and body text out of *html*.

    Open Graph tags win over Twitter card tags, which win over plain HTML.
    """
    soup = BeautifulSoup(html, "html.parser")

    html_title = soup.title.get_text().strip() if soup.title else None
    title = (
        _meta(soup, property="og:title")
        or _meta(soup, name="twitter:title")
        or html_title
        or "Untitled"
    )
    description = (
        _meta(soup, property="og:description")
        or _meta(soup, name="twitter:description")
        or _meta(soup, name="description")
        or ""
    )
    site_name = _meta(soup, property="og:site_name") or urlparse(url).hostname or url
    author = _meta(soup, name="author")

    body = _main_text(soup)
    full_content = ". ".join(part for part in (title, description, body) if part and part.strip())

    return ScrapedPage(
        title=title.strip(),
        content=full_content[:MAX_CONTENT_CHARS].strip(),
        url=url,
        site_name=site_name,
        author=author,
    )


class URLFetcher:
    """Content extraction for web pages and video links."""

    def __init__(self, settings: Settings, session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._session = session

    async def fetch_page(self, url: str) -> ScrapedPage:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ExtractionError(f"Invalid URL: {url}")

        logger.info("Scraping webpage: %s", url)
        html = await self._get_html(url)
        return extract_page(html, url)

    async def fetch_video(self, url: str) -> ScrapedPage:
        video_id = extract_youtube_video_id(url)
        if not video_id:
            raise ExtractionError(f"Invalid YouTube URL: {url}")

        page: ScrapedPage | None = None
        if self._settings.youtube_api_key:
            page = await self._fetch_video_metadata(video_id, url)
        if page is None:
            page = await self.fetch_page(url)

        content = f"YouTube Video: {page.title}. {page.content}"[:MAX_VIDEO_CONTENT_CHARS]
        return ScrapedPage(
            title=page.title,
            content=content.strip(),
            url=url,
            site_name="YouTube",
            author=page.author,
        )

    async def _get_html(self, url: str) -> str:
        timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)
        try:
            async with self._session.get(url, headers=_HTTP_HEADERS, timeout=timeout) as response:
                if response.status >= 400:
                    raise ExtractionError(
                        f"Failed to fetch URL: {response.status} {response.reason}"
                    )
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise ExtractionError(f"Failed to fetch URL {url}: {exc}") from exc

    async def _fetch_video_metadata(self, video_id: str, url: str) -> ScrapedPage | None:
        logger.info("Fetching YouTube video metadata for %s", video_id)
        timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)
        try:
            async with self._session.get(
                f"{self._settings.youtube_api_base_url}/videos",
                params={
                    "part": "snippet",
                    "id": video_id,
                    "key": self._settings.youtube_api_key,
                },
                timeout=timeout,
            ) as response:
                response.raise_for_status()
                data: Any = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("YouTube API lookup failed for %s: %s", video_id, str(exc)[:100])
            return None

        video_items = data.get("items") if isinstance(data, dict) else None
        if not video_items or not isinstance(video_items, list):
            logger.warning("No video found for ID %s", video_id)
            return None

        snippet = video_items[0].get("snippet") if isinstance(video_items[0], dict) else None
        if not isinstance(snippet, dict):
            logger.warning("Unexpected YouTube API payload for %s", video_id)
            return None

        title = snippet.get("title")
        if not isinstance(title, str) or not title.strip():
            title = "Unknown"
        description = snippet.get("description")
        description = clean_text(description) if isinstance(description, str) else ""
        return ScrapedPage(
            title=title,
            content=". ".join(part for part in (title, description) if part),
            url=url,
            site_name="YouTube",
            author=snippet.get("channelTitle"),
        )
