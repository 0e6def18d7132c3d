"""Decoding of structured payloads out of free-form model responses.

Models wrap JSON in commentary and markdown fences. Everything here is pure:
each decoder returns a :class:`DecodeResult` instead of raising, so the
calling stage decides whether a decode failure means retry or fallback.
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from truthscore.errors import DecodeError
from truthscore.models.types import (
    CLAIM_TYPES,
    MAX_CLAIMS,
    MAX_REASONS,
    MAX_SOURCES,
    STANCES,
    Article,
    Claim,
    SourceStance,
    VerificationResult,
)
from truthscore.processors.reliability import get_source_reliability

T = TypeVar("T")

DEFAULT_TRUTH_SCORE = 75.0
DEFAULT_REASON = "Analysis completed based on available sources"
DEFAULT_SUMMARY = "Content has been analyzed against available sources."
ARTICLE_SOURCE_LIMIT = 3

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    value: T | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def decode_json(raw: str | None, expect: type) -> DecodeResult[Any]:
    """Locate the first well-formed JSON value of type *expect* in *raw*.

    *expect* is ``list`` or ``dict``.
    """
    if not raw or not raw.strip():
        return DecodeResult(error=DecodeError("Empty response"))

    text = _FENCE_PATTERN.sub("", raw.strip())
    opener = "[" if expect is list else "{"

    position = text.find(opener)
    while position != -1:
        try:
            value, _ = _decoder.raw_decode(text, position)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, expect):
            return DecodeResult(value=value)
        position = text.find(opener, position + 1)

    return DecodeResult(
        error=DecodeError(f"No JSON {expect.__name__} found in response: {raw[:120]!r}")
    )


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _as_count(value: Any) -> int:
    number = _as_number(value)
    if number is None or math.isinf(number):
        return 0
    return max(0, int(number))


def parse_claims(raw: str | None) -> DecodeResult[list[Claim]]:
    """Decode and sanitise a claim list.

    Entries without string ``text``/``type`` or numeric ``confidence`` are
    dropped; unknown types become ``factual``; confidence is clamped to
    [0, 100]; missing or repeated ids are replaced; at most eight claims.
    """
    decoded = decode_json(raw, list)
    if not decoded.ok:
        return DecodeResult(error=decoded.error)

    claims: list[Claim] = []
    seen_ids: set[str] = set()
    for entry in decoded.value:
        if not isinstance(entry, dict):
            continue
        text = entry.get("text")
        claim_type = entry.get("type")
        confidence = entry.get("confidence")
        if not isinstance(text, str) or not text.strip():
            continue
        if not isinstance(claim_type, str) or not claim_type:
            continue
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            continue
        if math.isnan(confidence):
            continue

        claim_id = entry.get("id")
        if not isinstance(claim_id, str) or not claim_id or claim_id in seen_ids:
            suffix = len(claims) + 1
            claim_id = f"claim_{suffix}"
            while claim_id in seen_ids:
                suffix += 1
                claim_id = f"claim_{suffix}"
        seen_ids.add(claim_id)

        context = entry.get("context")
        claims.append(
            Claim(
                id=claim_id,
                text=text.strip(),
                type=claim_type if claim_type in CLAIM_TYPES else "factual",
                confidence=clamp(float(confidence), 0, 100),
                context=context.strip() if isinstance(context, str) and context.strip() else None,
            )
        )
        if len(claims) == MAX_CLAIMS:
            break

    return DecodeResult(value=claims)


def _url_for_source(name: str, articles: list[Article]) -> str:
    for article in articles:
        if article.source_name == name and article.url:
            return article.url
    return "#"


def _parse_source(entry: Any, articles: list[Article]) -> SourceStance | None:
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        name = "Unknown Source"
    name = name.strip()

    reliability = _as_number(entry.get("reliability"))
    if reliability is None:
        reliability = float(get_source_reliability(name))

    url = entry.get("url")
    if not isinstance(url, str) or not url:
        url = _url_for_source(name, articles)

    stance = entry.get("stance")
    return SourceStance(
        name=name,
        url=url,
        reliability=clamp(reliability, 0, 100),
        stance=stance if stance in STANCES else "neutral",
    )


def parse_verification(
    raw: str | None, articles: list[Article]
) -> DecodeResult[VerificationResult]:
    """Decode a verification payload and re-validate every field.

    The returned result carries no claims; the caller attaches them.
    """
    decoded = decode_json(raw, dict)
    if not decoded.ok:
        return DecodeResult(error=decoded.error)
    payload: dict[str, Any] = decoded.value

    truth_score = _as_number(payload.get("truthScore"))
    if truth_score is None:
        truth_score = DEFAULT_TRUTH_SCORE

    reasons = payload.get("reasons")
    if isinstance(reasons, list):
        reasons = [str(reason) for reason in reasons if reason][:MAX_REASONS]
    else:
        reasons = [DEFAULT_REASON]

    summary = payload.get("verificationSummary")
    if not isinstance(summary, str) or not summary.strip():
        summary = DEFAULT_SUMMARY

    raw_sources = payload.get("sources")
    if isinstance(raw_sources, list):
        sources = [
            source
            for source in (_parse_source(entry, articles) for entry in raw_sources[:MAX_SOURCES])
            if source is not None
        ]
    else:
        sources = [
            SourceStance(
                name=article.source_name,
                url=article.url,
                reliability=float(get_source_reliability(article.source_name)),
                stance="supports",
            )
            for article in articles[:ARTICLE_SOURCE_LIMIT]
        ]

    return DecodeResult(
        value=VerificationResult(
            truth_score=clamp(truth_score, 0, 100),
            reasons=tuple(reasons),
            claims=(),
            supporting_articles=_as_count(payload.get("supportingArticles")),
            contradicting_articles=_as_count(payload.get("contradictingArticles")),
            verification_summary=summary.strip(),
            sources=tuple(sources),
        )
    )
