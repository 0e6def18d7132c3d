from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "can", "this", "that", "these", "those",
    }
)

MAX_KEYWORDS = 5
MIN_KEYWORD_LENGTH = 4

_NON_WORD_PATTERN = re.compile(r"[^\w\s]")
_YOUTUBE_ID_PATTERNS = (
    re.compile(r"youtube\.com/watch\?v=([a-zA-Z0-9_-]+)"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]+)"),
    re.compile(r"youtube\.com/embed/([a-zA-Z0-9_-]+)"),
)


def extract_keywords(text: str) -> list[str]:
    """Return up to five distinct lowercase search keywords from *text*.

    Punctuation is stripped, short tokens and stop words are dropped, and
    first-seen order is kept.
    """
    if not text:
        return []

    words = _NON_WORD_PATTERN.sub("", text.lower()).split()
    keywords: list[str] = []
    for word in words:
        if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS:
            continue
        if word in keywords:
            continue
        keywords.append(word)
        if len(keywords) == MAX_KEYWORDS:
            break
    return keywords


def generate_search_query(text: str) -> str:
    return " ".join(extract_keywords(text))


def extract_youtube_video_id(url: str) -> str | None:
    for pattern in _YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def is_video_url(url: str) -> bool:
    """Return ``True`` when *url* points at a recognised video-hosting site."""
    return "youtube.com" in url or "youtu.be" in url


def clean_text(text: str) -> str:
    """Collapse whitespace and drop characters outside basic punctuation."""
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"[^\w\s.,!?;:()\-'\"]", "", text)
    return text.strip()
