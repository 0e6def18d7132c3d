from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Protocol

import aiohttp

from truthscore.config.settings import Settings
from truthscore.errors import (
    CollaboratorError,
    ConfigurationError,
    ModelNotFoundError,
    TruthScoreError,
)
from truthscore.processors.prompts import API_KEY_CHECK_PROMPT
from truthscore.processors.strategies import CallableStrategy, first_success

logger = logging.getLogger(__name__)

GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.1,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 8192,
}


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


def _is_model_not_found(exc: Exception) -> bool:
    return isinstance(exc, ModelNotFoundError)


class GeminiClient:
    """Text generation through the Gemini REST API.

    Model variants from ``settings.gemini_models`` are tried strictly in
    order. Only a 404 moves on to the next variant; any other failure ends
    the call.
    """

    def __init__(self, settings: Settings, session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._session = session
        self._strategies = [
            CallableStrategy(model, partial(self._generate_with_model, model))
            for model in settings.gemini_models
        ]

    def _ensure_api_key(self) -> None:
        if not self._settings.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key is not configured. Create one at "
                "https://aistudio.google.com/app/apikey and set GEMINI_API_KEY "
                "in your .env file."
            )

    async def generate(self, prompt: str) -> str:
        self._ensure_api_key()
        outcome = await first_success(
            self._strategies, prompt, fall_through=_is_model_not_found
        )
        logger.info("Gemini response received from model %s", outcome.strategy)
        return outcome.value

    async def check_api_key(self) -> tuple[bool, str]:
        try:
            reply = await self.generate(API_KEY_CHECK_PROMPT)
        except TruthScoreError as exc:
            return False, str(exc)
        return True, reply.strip()

    async def _generate_with_model(self, model: str, prompt: str) -> str:
        url = f"{self._settings.gemini_base_url}/models/{model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        timeout = aiohttp.ClientTimeout(total=self._settings.request_timeout)

        try:
            async with self._session.post(
                url,
                params={"key": self._settings.gemini_api_key},
                json=body,
                timeout=timeout,
            ) as response:
                if response.status == 404:
                    logger.warning("Model %s not found, trying next model", model)
                    raise ModelNotFoundError(f"Gemini model {model} not found")
                if response.status >= 400:
                    detail = await response.text()
                    raise CollaboratorError(
                        f"Gemini API request failed for {model}: "
                        f"{response.status} {detail[:200]}"
                    )
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise CollaboratorError(f"Gemini request to {model} failed: {exc}") from exc

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CollaboratorError(
                f"Invalid response from Gemini API for model {model}"
            ) from exc
