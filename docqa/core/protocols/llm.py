"""Generation backend protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.generation import BackendName


@runtime_checkable
class GenerationBackendProtocol(Protocol):
    """Protocol for a text generation backend."""

    name: BackendName

    def is_configured(self) -> bool:
        """Whether credentials for this backend are available."""
        ...

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Generate a completion for prompt.

        Args:
            prompt: Full prompt text.
            temperature: Sampling temperature.
            max_tokens: Max response tokens.

        Returns:
            Non-empty response text.

        Raises:
            ProviderUnavailable: If the backend is not configured.
            ProviderError: On request failure or empty response.
        """
        ...
