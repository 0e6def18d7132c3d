from __future__ import annotations


class TruthScoreError(Exception):
    """Base class for every error raised by truthscore."""


class ConfigurationError(TruthScoreError):
    """A collaborator is missing a credential or setting. Never retried."""


class UnsupportedInputError(TruthScoreError):
    """The caller submitted an input kind the pipeline cannot process."""


class VerificationError(TruthScoreError):
    """The single failure reported to the caller by the orchestrator."""


class CollaboratorError(TruthScoreError):
    """A transient failure from an external collaborator.

    Stages absorb these: claim extraction and cross verification retry and
    then fall back, evidence retrieval and content normalisation fall back
    immediately.
    """


class ModelNotFoundError(CollaboratorError):
    """The requested model variant does not exist (HTTP 404)."""


class NewsFetchError(CollaboratorError):
    """The news search API failed. Distinct from a search with zero hits."""


class ExtractionError(CollaboratorError):
    """Page or video content could not be extracted from a URL."""


class DecodeError(CollaboratorError):
    """Collaborator output could not be decoded into the expected shape."""


class EmptyResultError(CollaboratorError):
    """The collaborator answered, but with nothing usable."""


class StrategiesExhaustedError(CollaboratorError):
    """Every strategy in an ordered fallback list failed."""

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = errors
        last = errors[-1] if errors else None
        super().__init__(
            f"All {len(errors)} strategies failed. Last error: {last or 'unknown error'}"
        )
