from __future__ import annotations

import logging

from truthscore.errors import ConfigurationError
from truthscore.fetchers.news_fetcher import NewsFetcher
from truthscore.fetchers.utils import extract_keywords, generate_search_query
from truthscore.models.types import Article

logger = logging.getLogger(__name__)

FALLBACK_QUERY = "news"
SEARCH_PAGE_SIZE = 15
FALLBACK_PAGE_SIZE = 10
MAX_RELATED = 10
TITLE_MATCH_CHARS = 50


def relevance_score(article: Article, keywords: list[str]) -> int:
    title = (article.title or "").lower()
    description = (article.description or "").lower()
    score = 0
    for keyword in keywords:
        keyword = keyword.lower()
        if keyword in title:
            score += 3
        if keyword in description:
            score += 2
    return score


def is_relevant_article(article: Article, content: str, keywords: list[str]) -> bool:
    title = (article.title or "").lower()
    return (
        relevance_score(article, keywords) > 0
        or content.lower()[:TITLE_MATCH_CHARS] in title
    )


class EvidenceRetriever:
    """Finds news coverage related to a piece of content.

    Search failures and empty results fall back to top headlines once; if
    that fails too the result is an empty list.
    """

    def __init__(self, news: NewsFetcher, headlines_country: str = "us") -> None:
        self._news = news
        self._headlines_country = headlines_country

    async def find_related_articles(self, text: str) -> list[Article]:
        try:
            articles = await self._search(text)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.error("Error finding related articles: %s", exc)
            return await self._top_headlines()

        if not articles:
            logger.info("No related articles found")
            return await self._top_headlines()
        return articles

    async def _search(self, text: str) -> list[Article]:
        query = generate_search_query(text)
        logger.info("Search query: %s", query)

        if not query.strip():
            logger.info("No search terms generated, using fallback query")
            return await self._news.search(FALLBACK_QUERY, FALLBACK_PAGE_SIZE)

        articles = await self._news.search(query, SEARCH_PAGE_SIZE)
        keywords = extract_keywords(text)
        relevant = [a for a in articles if is_relevant_article(a, text, keywords)]
        logger.info(
            "Filtered %d candidates to %d relevant articles", len(articles), len(relevant)
        )
        return relevant[:MAX_RELATED]

    async def _top_headlines(self) -> list[Article]:
        logger.info("Using fallback: fetching top headlines")
        try:
            return await self._news.top_headlines(self._headlines_country, FALLBACK_PAGE_SIZE)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.error("Fallback also failed: %s", exc)
            return []
