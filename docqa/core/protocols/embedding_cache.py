"""Embedding cache protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class EmbeddingCacheProtocol(Protocol):
    """Key-value store of embeddings keyed by exact text."""

    def get(self, text: str) -> Optional[list[float]]:
        """Return the cached vector for text, or None."""
        ...

    def set(self, text: str, vector: list[float]) -> None:
        """Store the vector for text."""
        ...
