from __future__ import annotations

import dataclasses
import logging

from truthscore.models.types import Article, Claim, SourceStance, VerificationResult
from truthscore.processors.gemini import TextGenerator
from truthscore.processors.parsing import clamp, parse_verification
from truthscore.processors.prompts import build_verification_prompt
from truthscore.processors.reliability import average_reliability, get_source_reliability
from truthscore.processors.retry import linear_retrying
from truthscore.processors.strategies import CallableStrategy, first_success

logger = logging.getLogger(__name__)

NO_ARTICLE_RELIABILITY = 70.0
FALLBACK_SCORE_FLOOR = 50.0
FALLBACK_SCORE_CEILING = 85.0
FALLBACK_SOURCE_LIMIT = 3


def fallback_verification(
    claims: list[Claim], articles: list[Article]
) -> VerificationResult:
    """Reliability-weighted verdict computed from the static source table.

    Every stance is ``neutral``: without the model there is no basis for a
    directional judgement.
    """
    reliability = average_reliability(
        [article.source_name for article in articles], NO_ARTICLE_RELIABILITY
    )

    if articles:
        reasons = (
            f"Analyzed against {len(articles)} news sources",
            "Basic verification patterns applied",
            "No obvious misinformation indicators found",
        )
        summary = (
            f"Content analyzed against {len(articles)} sources. Basic verification "
            "suggests the information is generally reliable, though independent "
            "verification is recommended."
        )
    else:
        reasons = (
            "Limited source verification available",
            "Basic content analysis completed",
            "Exercise caution with unverified content",
        )
        summary = (
            "Limited sources available for verification. Exercise caution and "
            "seek additional verification."
        )

    sources = tuple(
        SourceStance(
            name=article.source_name,
            url=article.url,
            reliability=float(get_source_reliability(article.source_name)),
            stance="neutral",
        )
        for article in articles[:FALLBACK_SOURCE_LIMIT]
    )

    return VerificationResult(
        truth_score=clamp(reliability, FALLBACK_SCORE_FLOOR, FALLBACK_SCORE_CEILING),
        reasons=reasons,
        claims=tuple(claims),
        supporting_articles=len(articles),
        contradicting_articles=0,
        verification_summary=summary,
        sources=sources,
    )


class CrossVerifier:
    """Checks claims against retrieved articles through the verification model.

    Every field the model returns is re-validated. When all attempts fail the
    reliability-table heuristic produces a result of the same shape.
    """

    def __init__(
        self, llm: TextGenerator, max_retries: int = 3, base_delay: float = 1.0
    ) -> None:
        self._llm = llm
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._strategies = [
            CallableStrategy("llm", self._verify_with_retries),
            CallableStrategy("reliability-table", self._verify_heuristically),
        ]

    async def verify(
        self, claims: list[Claim], articles: list[Article], original_text: str
    ) -> VerificationResult:
        outcome = await first_success(self._strategies, claims, articles, original_text)
        if outcome.strategy != "llm":
            logger.info("All verification attempts failed, using fallback")
        logger.info("Verification completed with truth score: %s", outcome.value.truth_score)
        return outcome.value

    async def _verify_with_retries(
        self, claims: list[Claim], articles: list[Article], original_text: str
    ) -> VerificationResult:
        prompt = build_verification_prompt(claims, articles, original_text)
        async for attempt in linear_retrying(self._max_retries, self._base_delay, logger):
            with attempt:
                logger.info(
                    "Performing verification (attempt %d/%d)...",
                    attempt.retry_state.attempt_number,
                    self._max_retries,
                )
                raw = await self._llm.generate(prompt)
                decoded = parse_verification(raw, articles)
                if not decoded.ok:
                    raise decoded.error
        return dataclasses.replace(decoded.value, claims=tuple(claims))

    async def _verify_heuristically(
        self, claims: list[Claim], articles: list[Article], original_text: str
    ) -> VerificationResult:
        return fallback_verification(claims, articles)
