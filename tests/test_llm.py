"""Tests for the Ollama chat client against an in-process httpx transport."""

import asyncio
import json

import httpx
import pytest

from app.services.conversation import ChatMessage, Role
from app.services.llm import LLMServiceError, OllamaService

MESSAGES = [ChatMessage(Role.SYSTEM, "rules"), ChatMessage(Role.USER, "a film")]


def _run(handler, call):
    async def go():
        llm = OllamaService(
            base_url="http://ollama.test/",
            model="llama3.1:8b",
            timeout=5,
            transport=httpx.MockTransport(handler),
        )
        try:
            return await call(llm)
        finally:
            await llm.aclose()

    return asyncio.run(go())


class TestChat:
    def test_posts_messages_and_returns_content(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": {"role": "assistant", "content": "  {\"title\": \"Heat\"}\n"}})

        answer = _run(handler, lambda llm: llm.chat(MESSAGES))

        assert answer == "  {\"title\": \"Heat\"}\n"
        assert seen["url"] == "http://ollama.test/api/chat"
        assert seen["body"]["model"] == "llama3.1:8b"
        assert seen["body"]["stream"] is False
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "rules"},
            {"role": "user", "content": "a film"},
        ]

    def test_missing_content_is_empty(self):
        answer = _run(
            lambda request: httpx.Response(200, json={"message": {"role": "assistant"}}),
            lambda llm: llm.chat(MESSAGES),
        )
        assert answer == ""

    def test_http_error_raises(self):
        with pytest.raises(LLMServiceError, match=r"\(502\)"):
            _run(lambda request: httpx.Response(502, text="bad gateway"), lambda llm: llm.chat(MESSAGES))

    def test_connect_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LLMServiceError, match="not reachable"):
            _run(handler, lambda llm: llm.chat(MESSAGES))

    def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(LLMServiceError, match="did not respond"):
            _run(handler, lambda llm: llm.chat(MESSAGES))

    def test_non_json_body_raises(self):
        with pytest.raises(LLMServiceError, match="unreadable"):
            _run(lambda request: httpx.Response(200, text="<html>"), lambda llm: llm.chat(MESSAGES))

    def test_body_without_message_raises(self):
        with pytest.raises(LLMServiceError, match="no message"):
            _run(lambda request: httpx.Response(200, json={"done": True}), lambda llm: llm.chat(MESSAGES))


class TestHealthCheck:
    def test_model_loaded(self):
        status = _run(
            lambda request: httpx.Response(200, json={"models": [{"name": "llama3.1:8b"}, {"name": "phi3:mini"}]}),
            lambda llm: llm.health_check(),
        )
        assert status["llm_reachable"] is True
        assert status["model_loaded"] is True

    def test_unreachable_never_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        status = _run(handler, lambda llm: llm.health_check())
        assert status["llm_reachable"] is False
        assert "refused" in status["error"]
