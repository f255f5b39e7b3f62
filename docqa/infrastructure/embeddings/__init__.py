"""Embedding providers."""
from .cached import CachedEmbedder, InMemoryEmbeddingCache
from .openai_embedder import OpenAIEmbedder

__all__ = ["CachedEmbedder", "InMemoryEmbeddingCache", "OpenAIEmbedder"]
