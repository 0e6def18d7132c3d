from __future__ import annotations

import json
from typing import Any

import aiohttp
import pytest

from truthscore.config.settings import Settings
from truthscore.errors import CollaboratorError
from truthscore.models.types import Article


class FakeResponse:
    """Stands in for an aiohttp response used as an async context manager."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        text: str | None = None,
        reason: str = "OK",
    ) -> None:
        self.status = status
        self.reason = reason
        self._text = text if text is not None else json.dumps(payload)

    async def json(self) -> Any:
        return json.loads(self._text)

    async def text(self) -> str:
        return self._text

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise aiohttp.ClientError(f"{self.status}, message={self.reason!r}")

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


class FakeSession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: list[FakeResponse | Exception]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _next(self, method: str, url: str, kwargs: dict[str, Any]) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, kwargs)


class FakeLLM:
    """Scripted text generator; exceptions in the script are raised."""

    def __init__(self, replies: list[str | Exception]) -> None:
        self._replies = list(replies)
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._replies:
            raise CollaboratorError("No scripted reply left")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def test_settings() -> Settings:
    """Settings with dummy keys and no retry delay."""
    return Settings(
        gemini_api_key="test-gemini-key",
        newsapi_key="test-news-key",
        gemini_models=["model-a", "model-b"],
        gemini_base_url="https://gemini.test/v1beta",
        newsapi_base_url="https://newsapi.test/v2",
        youtube_api_base_url="https://youtube.test/v3",
        max_retries=3,
        retry_base_delay=0.0,
        request_timeout=5,
    )


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def bbc_article() -> Article:
    return Article(
        source_name="BBC",
        title="Bridge collapse kills ten as river crossing gives way",
        url="https://www.bbc.com/news/bridge-collapse",
        published_at="2025-03-03T18:00:00Z",
        description="Ten people died when the bridge collapsed on Monday evening.",
        content="Rescue teams worked through the night...",
    )


@pytest.fixture
def reuters_article() -> Article:
    return Article(
        source_name="Reuters",
        title="Death toll rises after bridge collapsed in March",
        url="https://www.reuters.com/world/bridge-death-toll",
        published_at="2025-03-04T07:30:00Z",
        description="Officials confirmed the number of people killed.",
        content="Authorities said an inquiry would begin...",
    )


@pytest.fixture
def unrelated_article() -> Article:
    return Article(
        source_name="Bloomberg",
        title="Markets rally on tech earnings",
        url="https://www.bloomberg.com/markets",
        published_at="2025-03-04T07:30:00Z",
        description="Stocks climbed as chipmakers beat estimates.",
    )
