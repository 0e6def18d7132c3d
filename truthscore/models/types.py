from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

INPUT_KINDS = ("text", "link", "video")
CLAIM_TYPES = ("factual", "opinion", "prediction", "statistic")
STANCES = ("supports", "contradicts", "neutral")

MISINFORMATION_THRESHOLD = 60
MAX_CLAIMS = 8
MAX_REASONS = 5
MAX_SOURCES = 5
MAX_RELATED_ARTICLES = 5

_STATUS_LABELS = (
    (90, "Highly Verified"),
    (80, "Mostly Verified"),
    (70, "Partially Verified"),
    (60, "Questionable"),
    (50, "Likely Misinformation"),
)


@dataclass(frozen=True)
class VerificationInput:
    """A piece of user-submitted content: text, a link, or a video reference."""

    kind: str
    content: str


@dataclass(frozen=True)
class ProcessedInput:
    """Canonical text payload derived from a VerificationInput."""

    original_content: str
    extracted_text: str
    title: str | None = None
    url: str | None = None
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScrapedPage:
    """What the content-extraction collaborator returns for a URL."""

    title: str
    content: str
    url: str
    site_name: str
    author: str | None = None


@dataclass(frozen=True)
class Claim:
    """An atomic, typed, confidence-scored assertion extracted from content."""

    id: str
    text: str
    type: str
    confidence: float
    context: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Article:
    """A candidate evidence article returned by the news search API."""

    source_name: str
    title: str
    url: str
    published_at: str
    description: str | None = None
    content: str | None = None
    source_id: str | None = None
    author: str | None = None
    image_url: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Article":
        source = payload.get("source") or {}
        return cls(
            source_name=source.get("name") or "Unknown",
            source_id=source.get("id"),
            title=payload.get("title") or "",
            url=payload.get("url") or "",
            published_at=payload.get("publishedAt") or "",
            description=payload.get("description"),
            content=payload.get("content"),
            author=payload.get("author"),
            image_url=payload.get("urlToImage"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SourceStance:
    """How one news source relates to the extracted claims."""

    name: str
    url: str
    reliability: float
    stance: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def status_label(truth_score: float) -> str:
    for threshold, label in _STATUS_LABELS:
        if truth_score >= threshold:
            return label
    return "High Risk of Misinformation"


@dataclass(frozen=True)
class VerificationResult:
    """The outcome of cross-verifying claims against news coverage.

    ``is_likely_misinformation`` is derived from ``truth_score`` and cannot be
    set independently.
    """

    truth_score: float
    reasons: tuple[str, ...]
    claims: tuple[Claim, ...]
    supporting_articles: int
    contradicting_articles: int
    verification_summary: str
    sources: tuple[SourceStance, ...] = field(default_factory=tuple)

    @property
    def is_likely_misinformation(self) -> bool:
        return self.truth_score < MISINFORMATION_THRESHOLD

    @property
    def status_label(self) -> str:
        return status_label(self.truth_score)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["reasons"] = list(self.reasons)
        data["claims"] = [claim.to_dict() for claim in self.claims]
        data["sources"] = [source.to_dict() for source in self.sources]
        data["is_likely_misinformation"] = self.is_likely_misinformation
        data["status_label"] = self.status_label
        return data


@dataclass(frozen=True)
class CompleteVerificationResult(VerificationResult):
    """The terminal artifact handed back to the caller for one request."""

    input: ProcessedInput | None = None
    related_articles: tuple[Article, ...] = field(default_factory=tuple)
    processing_time_ms: float = 0.0
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["input"] = self.input.to_dict() if self.input else None
        data["related_articles"] = [article.to_dict() for article in self.related_articles]
        return data
