"""Domain models."""
from .document import (
    ChunkMetadata,
    DocumentChunk,
    LoadedDocument,
    MetadataFilter,
    RetrievedMatch,
    VectorRecord,
)
from .generation import (
    FALLBACK_STRATEGY,
    BackendName,
    GenerationOptions,
    GenerationResult,
)
from .query import QueryPreprocessingResult
from .rag import RAGQueryOptions, RAGResult, RAGSource

__all__ = [
    "ChunkMetadata",
    "DocumentChunk",
    "LoadedDocument",
    "MetadataFilter",
    "RetrievedMatch",
    "VectorRecord",
    "FALLBACK_STRATEGY",
    "BackendName",
    "GenerationOptions",
    "GenerationResult",
    "QueryPreprocessingResult",
    "RAGQueryOptions",
    "RAGResult",
    "RAGSource",
]
