from __future__ import annotations

import logging

from truthscore.errors import UnsupportedInputError
from truthscore.fetchers.url_fetcher import URLFetcher
from truthscore.fetchers.utils import is_video_url
from truthscore.models.types import INPUT_KINDS, ProcessedInput, VerificationInput

logger = logging.getLogger(__name__)


class ContentNormalizer:
    """Turns a typed input into the single text payload later stages read.

    Link extraction failures never escape: the URL itself becomes the text.
    Video inputs are only identified by their reference; no media analysis
    takes place.
    """

    def __init__(self, fetcher: URLFetcher) -> None:
        self._fetcher = fetcher

    async def process_input(self, item: VerificationInput) -> ProcessedInput:
        if item.kind not in INPUT_KINDS:
            raise UnsupportedInputError(f"Unsupported input type: {item.kind}")

        if item.kind == "text":
            return ProcessedInput(
                original_content=item.content,
                extracted_text=item.content,
                title="User Submitted Text",
            )
        if item.kind == "link":
            return await self._process_link(item.content)
        return ProcessedInput(
            original_content=item.content,
            extracted_text=f"Video content: {item.content}",
            title="Video Content",
        )

    async def _process_link(self, url: str) -> ProcessedInput:
        try:
            if is_video_url(url):
                page = await self._fetcher.fetch_video(url)
            else:
                page = await self._fetcher.fetch_page(url)
        except Exception as exc:
            logger.error("Failed to extract content from %s: %s", url, exc)
            return self._link_placeholder(url)

        if not page.content.strip():
            logger.warning("No content extracted from %s, using URL as text", url)
            return self._link_placeholder(url)

        return ProcessedInput(
            original_content=url,
            extracted_text=page.content,
            title=page.title,
            url=url,
            source=page.site_name,
        )

    @staticmethod
    def _link_placeholder(url: str) -> ProcessedInput:
        return ProcessedInput(
            original_content=url,
            extracted_text=f"Content from URL: {url}",
            title="Link Content",
            url=url,
        )
