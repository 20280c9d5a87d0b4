"""
AI text providers for answering application questions.

  GEMINI_API_KEY      -> Google Gemini, primary (default: gemini-2.5-flash)
  OPENROUTER_API_KEY  -> OpenRouter chat completions, backup
                         (default: xiaomi/mimo-v2-flash:free)

Providers only generate text. Routing between them (which one is active,
which one is exhausted) belongs to the answer resolver.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

log = logging.getLogger(__name__)

_GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta"
_OPENROUTER_BASE = "https://openrouter.ai/api/v1"

_TEMPERATURE = 0.3
_MAX_OUTPUT_TOKENS = 500

_GEMINI_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


class ProviderError(Exception):
    """A provider failed to produce text."""


class RateLimitError(ProviderError):
    """The provider reported a rate limit or exhausted quota."""


class TextProvider(Protocol):
    name: str

    def generate(self, prompt: str) -> str: ...


def _looks_rate_limited(status_code: int, body: str) -> bool:
    if status_code == 429:
        return True
    lowered = body.lower()
    return "quota" in lowered or "rate limit" in lowered or "resource_exhausted" in lowered


class _HttpProvider:
    """Shared request and error mapping for the REST providers."""

    name = "http"

    def __init__(self, api_key: str, model: str, timeout: float = 60.0,
                 client: httpx.Client | None = None) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client or httpx.Client(timeout=timeout)

    def _post(self, url: str, **kwargs) -> dict:
        try:
            resp = self._client.post(url, **kwargs)
        except httpx.TimeoutException as exc:
            raise ProviderError(f"{self.name} request timed out") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name} request failed: {exc}") from exc

        if resp.status_code >= 400:
            body = resp.text[:500]
            if _looks_rate_limited(resp.status_code, body):
                raise RateLimitError(f"{self.name} rate limited (HTTP {resp.status_code}): {body[:200]}")
            raise ProviderError(f"{self.name} HTTP {resp.status_code}: {body[:200]}")

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(f"{self.name} returned non-JSON response") from exc

    def close(self) -> None:
        self._client.close()


class GeminiProvider(_HttpProvider):
    """Google Gemini via the native generateContent API."""

    name = "gemini"

    def generate(self, prompt: str) -> str:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "safetySettings": _GEMINI_SAFETY_SETTINGS,
            "generationConfig": {
                "temperature": _TEMPERATURE,
                "maxOutputTokens": _MAX_OUTPUT_TOKENS,
            },
        }
        data = self._post(
            f"{_GEMINI_BASE}/models/{self.model}:generateContent",
            json=payload,
            headers={"Content-Type": "application/json"},
            params={"key": self.api_key},
        )
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError("gemini response did not include text content") from exc
        return "".join(part.get("text", "") for part in parts).strip()


class OpenRouterProvider(_HttpProvider):
    """OpenRouter's OpenAI-compatible chat completions endpoint."""

    name = "openrouter"

    def generate(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": _TEMPERATURE,
            "max_tokens": _MAX_OUTPUT_TOKENS,
            "provider": {"sort": "throughput"},
        }
        data = self._post(
            f"{_OPENROUTER_BASE}/chat/completions",
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
        )
        # OpenRouter reports upstream failures inside a 200 body
        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = str(error.get("message", error)) if isinstance(error, dict) else str(error)
            code = error.get("code", 0) if isinstance(error, dict) else 0
            if _looks_rate_limited(int(code or 0), message):
                raise RateLimitError(f"openrouter rate limited: {message[:200]}")
            raise ProviderError(f"openrouter error: {message[:200]}")
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError("openrouter response did not include a message") from exc
        return (content or "").strip()


def build_providers(ai_settings) -> tuple[TextProvider | None, TextProvider | None]:
    """Return (primary, backup) providers for the configured API keys."""
    primary = None
    backup = None
    if ai_settings.gemini_api_key:
        primary = GeminiProvider(ai_settings.gemini_api_key, ai_settings.gemini_model,
                                 timeout=ai_settings.timeout)
        log.info("AI primary provider: gemini (%s)", ai_settings.gemini_model)
    if ai_settings.openrouter_api_key:
        backup = OpenRouterProvider(ai_settings.openrouter_api_key, ai_settings.openrouter_model,
                                    timeout=ai_settings.timeout)
        log.info("AI backup provider: openrouter (%s)", ai_settings.openrouter_model)
    if primary is None and backup is None:
        log.warning("No AI providers configured - using preset answers only")
    return primary, backup
