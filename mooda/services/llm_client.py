"""
Text-completion client for the Gemini REST API.

The service is treated as a black box: prompt in, text out. Every failure
(network, timeout, non-2xx, unexpected body) is raised as an `LLMError`
subclass so callers can fall back without inspecting httpx internals.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from mooda.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when the LLM call fails (network, API, etc)."""


class LLMTimeoutError(LLMError):
    """The LLM call exceeded its timeout."""


class LLMResponseError(LLMError):
    """The LLM answered with a non-2xx status or an unusable body."""


class TextCompletionClient(Protocol):
    def complete(self, prompt: str) -> str: ...


class GeminiClient:
    """
    Minimal `generateContent` caller.

    `transport` lets tests plug in `httpx.MockTransport`; production code
    leaves it unset.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> Optional["GeminiClient"]:
        """Build a client from settings, or None when no API key is configured."""
        cfg = cfg or default_settings
        if not cfg.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not configured. Remote LLM calls are disabled.")
            return None
        return cls(
            api_key=cfg.GEMINI_API_KEY,
            model=cfg.GEMINI_MODEL,
            base_url=cfg.GEMINI_API_URL,
            timeout=cfg.LLM_TIMEOUT_SECONDS,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def complete(self, prompt: str) -> str:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                )
        except httpx.TimeoutException as exc:
            raise LLMTimeoutError(f"Gemini call timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise LLMError(f"Gemini call failed: {exc}") from exc

        if response.status_code != 200:
            raise LLMResponseError(
                f"Gemini returned {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError(f"Unexpected Gemini response body: {exc}") from exc

        if not isinstance(text, str) or not text.strip():
            raise LLMResponseError("Gemini returned an empty completion")
        return text


def get_llm_client() -> Optional[TextCompletionClient]:
    """FastAPI dependency; None when no Gemini key is configured."""
    return GeminiClient.from_settings()
