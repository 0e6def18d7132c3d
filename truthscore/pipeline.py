from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

import aiohttp

from truthscore.config.settings import Settings
from truthscore.errors import VerificationError
from truthscore.fetchers.news_fetcher import NewsFetcher
from truthscore.fetchers.url_fetcher import URLFetcher
from truthscore.models.types import (
    MAX_RELATED_ARTICLES,
    CompleteVerificationResult,
    VerificationInput,
)
from truthscore.processors.claim_extractor import ClaimExtractor
from truthscore.processors.evidence import EvidenceRetriever
from truthscore.processors.gemini import GeminiClient
from truthscore.processors.normalizer import ContentNormalizer
from truthscore.processors.verifier import CrossVerifier

logger = logging.getLogger(__name__)


class VerificationPipeline:
    """Runs normalisation, claim extraction, evidence retrieval and
    cross-verification for one input and assembles the final result.

    Retries live inside the stages; this class never retries and never
    returns a partial result.
    """

    def __init__(
        self,
        normalizer: ContentNormalizer,
        claim_extractor: ClaimExtractor,
        evidence_retriever: EvidenceRetriever,
        verifier: CrossVerifier,
    ) -> None:
        self.normalizer = normalizer
        self.claim_extractor = claim_extractor
        self.evidence_retriever = evidence_retriever
        self.verifier = verifier

    async def verify_content(self, item: VerificationInput) -> CompleteVerificationResult:
        started = time.perf_counter()
        logger.info("Starting verification for %s content...", item.kind)

        try:
            processed = await self.normalizer.process_input(item)
            claims = await self.claim_extractor.extract_claims(processed.extracted_text)
            articles = await self.evidence_retriever.find_related_articles(
                processed.extracted_text
            )
            verdict = await self.verifier.verify(claims, articles, processed.extracted_text)
        except Exception as exc:
            logger.error("Verification process failed: %s", exc)
            raise VerificationError(f"Verification failed: {exc}") from exc

        processing_time_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Verification of %s content finished in %.0f ms (truth score %s)",
            item.kind,
            processing_time_ms,
            verdict.truth_score,
        )
        return CompleteVerificationResult(
            truth_score=verdict.truth_score,
            reasons=verdict.reasons,
            claims=tuple(claims),
            supporting_articles=verdict.supporting_articles,
            contradicting_articles=verdict.contradicting_articles,
            verification_summary=verdict.verification_summary,
            sources=verdict.sources,
            input=processed,
            related_articles=tuple(articles[:MAX_RELATED_ARTICLES]),
            processing_time_ms=processing_time_ms,
            timestamp=datetime.now(tz=timezone.utc).isoformat(),
        )


def build_pipeline(settings: Settings, session: aiohttp.ClientSession) -> VerificationPipeline:
    gemini = GeminiClient(settings, session)
    return VerificationPipeline(
        normalizer=ContentNormalizer(URLFetcher(settings, session)),
        claim_extractor=ClaimExtractor(
            gemini, settings.max_retries, settings.retry_base_delay
        ),
        evidence_retriever=EvidenceRetriever(
            NewsFetcher(settings, session), settings.headlines_country
        ),
        verifier=CrossVerifier(gemini, settings.max_retries, settings.retry_base_delay),
    )
