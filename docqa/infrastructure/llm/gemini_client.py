import logging

import httpx

from docqa.core.errors import ProviderError, ProviderUnavailable
from docqa.core.models.generation import BackendName

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiBackend:
    """Generation backend for the Gemini REST API."""

    name = BackendName.GEMINI

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-1.5-pro",
        timeout: float = 60.0,
        base_url: str = GEMINI_API_URL,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        if not self._api_key:
            raise ProviderUnavailable("gemini backend is not configured")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    f"{self._base_url}/models/{self._model}:generateContent",
                    params={"key": self._api_key},
                    json=payload,
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"gemini API error: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            raise ProviderError("Malformed response from gemini API") from None

        text = "".join(p.get("text", "") for p in parts)
        if not text.strip():
            raise ProviderError("Empty response from gemini API")
        return text
