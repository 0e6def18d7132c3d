"""Tests for the Gemini client model cascade."""
from __future__ import annotations

import asyncio
import dataclasses

import aiohttp
import pytest

from truthscore.errors import CollaboratorError, ConfigurationError, StrategiesExhaustedError
from truthscore.processors.gemini import GeminiClient


def _reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestGenerate:
    def test_first_model_answers(self, test_settings, make_session, make_response):
        session = make_session([make_response(200, _reply("hello"))])
        client = GeminiClient(test_settings, session)

        assert asyncio.run(client.generate("prompt")) == "hello"

        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert url == "https://gemini.test/v1beta/models/model-a:generateContent"
        assert kwargs["params"] == {"key": "test-gemini-key"}
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "prompt"

    def test_not_found_moves_to_next_model(self, test_settings, make_session, make_response):
        session = make_session(
            [make_response(404, {}, reason="Not Found"), make_response(200, _reply("from b"))]
        )
        client = GeminiClient(test_settings, session)

        assert asyncio.run(client.generate("prompt")) == "from b"
        assert [call[1].rsplit("/", 1)[-1] for call in session.calls] == [
            "model-a:generateContent",
            "model-b:generateContent",
        ]

    def test_other_http_error_stops_cascade(self, test_settings, make_session, make_response):
        session = make_session(
            [make_response(500, text="server exploded"), make_response(200, _reply("never"))]
        )
        client = GeminiClient(test_settings, session)

        with pytest.raises(CollaboratorError, match="500"):
            asyncio.run(client.generate("prompt"))
        assert len(session.calls) == 1

    def test_network_error_stops_cascade(self, test_settings, make_session, make_response):
        session = make_session(
            [aiohttp.ClientConnectionError("refused"), make_response(200, _reply("never"))]
        )
        client = GeminiClient(test_settings, session)

        with pytest.raises(CollaboratorError, match="refused"):
            asyncio.run(client.generate("prompt"))
        assert len(session.calls) == 1

    def test_all_models_missing(self, test_settings, make_session, make_response):
        session = make_session([make_response(404, {}), make_response(404, {})])
        client = GeminiClient(test_settings, session)

        with pytest.raises(StrategiesExhaustedError):
            asyncio.run(client.generate("prompt"))

    def test_malformed_response(self, test_settings, make_session, make_response):
        session = make_session([make_response(200, {"candidates": []})])
        client = GeminiClient(test_settings, session)

        with pytest.raises(CollaboratorError, match="Invalid response"):
            asyncio.run(client.generate("prompt"))

    def test_missing_key_is_configuration_error(self, test_settings, make_session):
        settings = dataclasses.replace(test_settings, gemini_api_key="")
        session = make_session([])
        client = GeminiClient(settings, session)

        with pytest.raises(ConfigurationError):
            asyncio.run(client.generate("prompt"))
        assert session.calls == []


class TestCheckApiKey:
    def test_working_key(self, test_settings, make_session, make_response):
        session = make_session([make_response(200, _reply(" API key is working \n"))])
        ok, message = asyncio.run(GeminiClient(test_settings, session).check_api_key())
        assert ok is True
        assert message == "API key is working"

    def test_missing_key(self, test_settings, make_session):
        settings = dataclasses.replace(test_settings, gemini_api_key="")
        ok, message = asyncio.run(GeminiClient(settings, make_session([])).check_api_key())
        assert ok is False
        assert "GEMINI_API_KEY" in message
