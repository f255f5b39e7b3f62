"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .embedding_cache import EmbeddingCacheProtocol
from .vector_store import VectorStoreProtocol
from .llm import GenerationBackendProtocol

__all__ = [
    "EmbedderProtocol",
    "EmbeddingCacheProtocol",
    "VectorStoreProtocol",
    "GenerationBackendProtocol",
]
