"""Ollama chat service which calls the HTTP chat API for a single completion."""

import logging
from collections.abc import Sequence

import httpx

from app.config import settings
from app.services.conversation import ChatMessage

logger = logging.getLogger(__name__)


class LLMServiceError(RuntimeError):
    """Raised when the chat endpoint cannot produce a completion."""


class OllamaService:
    """One instance per process; the underlying client is shared by all requests."""

    def __init__(
        self,
        base_url: str = settings.ollama_base_url,
        model: str = settings.ollama_model,
        timeout: float = settings.ollama_timeout,
        temperature: float = settings.ollama_temperature,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._temperature = temperature
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
        )

    @property
    def model(self) -> str:
        return self._model

    async def aclose(self) -> None:
        await self._client.aclose()

    async def health_check(self) -> dict:
        """Check if Ollama is reachable and the model is available."""
        try:
            resp = await self._client.get("/api/tags", timeout=10)
            resp.raise_for_status()
            data = resp.json()
            models = [m["name"] for m in data.get("models", [])]
            model_loaded = any(self._model in m for m in models)
            return {
                "llm_reachable": True,
                "model_loaded": model_loaded,
                "model": self._model,
                "available_models": models,
            }
        except Exception as exc:
            logger.warning("Ollama health check failed: %s", exc)
            return {
                "llm_reachable": False,
                "model_loaded": False,
                "model": self._model,
                "error": str(exc),
            }

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        payload = {
            "model": self._model,
            "messages": [m.to_dict() for m in messages],
            "stream": False,
            "options": {"temperature": self._temperature},
        }

        try:
            resp = await self._client.post("/api/chat", json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.TimeoutException as exc:
            logger.error("Ollama request timed out after %.0fs", self._timeout)
            raise LLMServiceError(
                f"The language model did not respond within {self._timeout:.0f}s"
            ) from exc
        except httpx.HTTPStatusError as exc:
            logger.error("Ollama HTTP error: %s", exc)
            raise LLMServiceError(
                f"LLM service error ({exc.response.status_code})"
            ) from exc
        except httpx.ConnectError as exc:
            logger.error("Cannot connect to Ollama at %s", self._base_url)
            raise LLMServiceError(
                f"The LLM service is not reachable at {self._base_url}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Ollama request failed: %s", exc)
            raise LLMServiceError(f"LLM request failed: {exc}") from exc
        except ValueError as exc:
            logger.error("Ollama returned a non-JSON body")
            raise LLMServiceError("LLM service returned an unreadable response") from exc

        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, dict):
            raise LLMServiceError("LLM service response has no message")
        return message.get("content") or ""
