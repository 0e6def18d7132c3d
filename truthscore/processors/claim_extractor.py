from __future__ import annotations

import logging
import re

from truthscore.errors import EmptyResultError
from truthscore.models.types import Claim
from truthscore.processors.gemini import TextGenerator
from truthscore.processors.parsing import parse_claims
from truthscore.processors.prompts import build_claim_extraction_prompt
from truthscore.processors.retry import linear_retrying
from truthscore.processors.strategies import CallableStrategy, first_success

logger = logging.getLogger(__name__)

FALLBACK_CLAIM_LIMIT = 3
FALLBACK_CONFIDENCE = 60
FALLBACK_CONTEXT = "Heuristically generated from content analysis"

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def fallback_claims(content: str) -> list[Claim]:
    """Treat the first few mid-length sentences of *content* as factual claims."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(content)]
    sentences = [s for s in sentences if 20 < len(s) < 200][:FALLBACK_CLAIM_LIMIT]
    return [
        Claim(
            id=f"fallback_{index}",
            text=sentence,
            type="factual",
            confidence=FALLBACK_CONFIDENCE,
            context=FALLBACK_CONTEXT,
        )
        for index, sentence in enumerate(sentences, start=1)
    ]


class ClaimExtractor:
    """Claim extraction that always terminates with a claim list.

    The model is asked up to ``max_retries`` times; after that the sentence
    heuristic answers instead. Only configuration errors escape.
    """

    def __init__(
        self, llm: TextGenerator, max_retries: int = 3, base_delay: float = 1.0
    ) -> None:
        self._llm = llm
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._strategies = [
            CallableStrategy("llm", self._extract_with_retries),
            CallableStrategy("sentence-heuristic", self._extract_heuristically),
        ]

    async def extract_claims(self, text: str) -> list[Claim]:
        outcome = await first_success(self._strategies, text)
        if outcome.strategy != "llm":
            logger.info("Using %d fallback claims", len(outcome.value))
        return outcome.value

    async def _extract_with_retries(self, text: str) -> list[Claim]:
        async for attempt in linear_retrying(self._max_retries, self._base_delay, logger):
            with attempt:
                logger.info(
                    "Extracting claims (attempt %d/%d)...",
                    attempt.retry_state.attempt_number,
                    self._max_retries,
                )
                claims = await self._request_claims(text)
        logger.info("Successfully extracted %d claims", len(claims))
        return claims

    async def _request_claims(self, text: str) -> list[Claim]:
        raw = await self._llm.generate(build_claim_extraction_prompt(text))
        decoded = parse_claims(raw)
        if not decoded.ok:
            raise decoded.error
        if not decoded.value:
            raise EmptyResultError("Claim extraction returned no valid claims")
        return decoded.value

    async def _extract_heuristically(self, text: str) -> list[Claim]:
        return fallback_claims(text)
