"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding service."""

    def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Args:
            text: Text to embed.

        Returns:
            Embedding vector.

        Raises:
            ProviderUnavailable: If the provider has no credentials.
            ProviderError: If the provider call fails or returns nothing.
        """
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed many texts in one request.

        Args:
            texts: Texts to embed.

        Returns:
            One vector per text, in order.
        """
        ...
