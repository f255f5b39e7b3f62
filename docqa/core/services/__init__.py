"""Core business services."""
from .retrieval_service import RetrievalService
from .generation_service import GenerationRouter
from .rag_service import RAGService
from .ingest_service import IngestQueue, IngestService

__all__ = [
    "RetrievalService",
    "GenerationRouter",
    "RAGService",
    "IngestQueue",
    "IngestService",
]
