import logging
import threading
from typing import Optional

from docqa.core.protocols.embedder import EmbedderProtocol
from docqa.core.protocols.embedding_cache import EmbeddingCacheProtocol

logger = logging.getLogger(__name__)


class InMemoryEmbeddingCache:
    """Process-local embedding cache. No eviction."""

    def __init__(self):
        self._vectors: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def get(self, text: str) -> Optional[list[float]]:
        with self._lock:
            return self._vectors.get(text)

    def set(self, text: str, vector: list[float]) -> None:
        with self._lock:
            self._vectors[text] = vector

    def __len__(self) -> int:
        return len(self._vectors)


class CachedEmbedder:
    """Embedder wrapper: check cache, compute on miss, write through.

    Only single-text lookups are cached; batches go straight to the
    provider as one request.
    """

    def __init__(self, embedder: EmbedderProtocol, cache: EmbeddingCacheProtocol):
        self._embedder = embedder
        self._cache = cache

    def embed(self, text: str) -> list[float]:
        cached = self._cache.get(text)
        if cached is not None:
            logger.debug(f"Embedding cache hit for '{text[:40]}'")
            return cached

        vector = self._embedder.embed(text)
        self._cache.set(text, vector)
        return vector

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return self._embedder.embed_batch(texts)
