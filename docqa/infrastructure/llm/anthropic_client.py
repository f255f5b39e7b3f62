import logging

from anthropic import AnthropicError, AsyncAnthropic

from docqa.core.errors import ProviderError, ProviderUnavailable
from docqa.core.models.generation import BackendName

logger = logging.getLogger(__name__)


class AnthropicBackend:
    """Generation backend for the Anthropic messages API."""

    name = BackendName.ANTHROPIC

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-3-5-sonnet-20241022",
        timeout: float = 60.0,
    ):
        self._model = model
        self._client = (
            AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
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
        if self._client is None:
            raise ProviderUnavailable("anthropic backend is not configured")

        try:
            message = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except AnthropicError as e:
            raise ProviderError(f"anthropic API error: {e}") from e

        texts = [block.text for block in message.content or [] if block.type == "text"]
        if not texts or not texts[0].strip():
            raise ProviderError("No text content in anthropic API response")

        return texts[0]
