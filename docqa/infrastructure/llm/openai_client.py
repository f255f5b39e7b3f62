
import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from docqa.core.errors import ProviderError, ProviderUnavailable
from docqa.core.models.generation import BackendName

logger = logging.getLogger(__name__)


class OpenAIBackend:
    """Generation backend for the OpenAI chat completions API."""

    name = BackendName.OPENAI

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4-turbo-preview",
        timeout: float = 60.0,
        base_url: Optional[str] = None,
    ):
        """Initialize OpenAI backend.

        Args:
            api_key: API key; empty means not configured.
            model: Model name.
            timeout: Request timeout in seconds.
            base_url: Alternative OpenAI-compatible endpoint.
        """
        self._model = model
        self._client = (
            AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
            if api_key
            else None
        )

    def is_configured(self) -> bool:
        return self._client is not None

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Generate a completion.

        Args:
            prompt: Full prompt text.
            temperature: Sampling temperature.
            max_tokens: Max response tokens.

        Returns:
            Response text.
        """
        if self._client is None:
            raise ProviderUnavailable(f"{self.name.value} backend is not configured")

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            raise ProviderError(f"{self.name.value} API error: {e}") from e

        if not response.choices:
            raise ProviderError(f"No response from {self.name.value} API")

        text = response.choices[0].message.content or ""
        if not text.strip():
            raise ProviderError(f"Empty response from {self.name.value} API")

        logger.debug(f"{self.name.value} generated {len(text)} chars with {self._model}")
        return text


class OllamaBackend(OpenAIBackend):
    """Local Ollama server through its OpenAI-compatible API."""

    name = BackendName.OLLAMA

    def __init__(
        self,
        base_url: str = "",
        model: str = "qwen2.5:7b",
        timeout: float = 60.0,
    ):
        """Initialize Ollama backend.

        Args:
            base_url: Ollama API URL, e.g. http://localhost:11434/v1;
                empty means not configured.
            model: Model name.
            timeout: Request timeout in seconds.
        """
        super().__init__(
            api_key="ollama" if base_url else "",
            model=model,
            timeout=timeout,
            base_url=base_url or None,
        )
