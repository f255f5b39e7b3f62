"""Shared fakes for docqa tests."""

import re
import zlib
from typing import Optional

import pytest

from docqa.core.errors import ProviderError
from docqa.core.models import (
    BackendName,
    ChunkMetadata,
    DocumentChunk,
    MetadataFilter,
    RetrievedMatch,
)
from docqa.core.services.generation_service import GenerationRouter
from docqa.core.services.rag_service import RAGService
from docqa.core.services.retrieval_service import RetrievalService
from docqa.infrastructure.vector_stores.memory_store import InMemoryVectorStore

DIM = 64


class FakeEmbedder:
    """Deterministic bag-of-words embedder.

    A fixed `constant` vector can be given to make every text equally
    similar to every other.
    """

    def __init__(self, constant: Optional[list[float]] = None):
        self.constant = constant
        self.embed_calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        if self.constant is not None:
            return list(self.constant)
        vector = [0.0] * DIM
        for token in re.findall(r"\w+", text.lower()):
            vector[zlib.crc32(token.encode()) % DIM] += 1.0
        if not any(vector):
            vector[0] = 1.0
        return vector

    def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        return self._vector(text)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [self._vector(t) for t in texts]


class StubVectorStore:
    """Returns a fixed candidate list and records queries."""

    def __init__(self, candidates: list[RetrievedMatch]):
        self.candidates = candidates
        self.queries: list[tuple[list[float], int, Optional[MetadataFilter]]] = []

    def query(self, vector, top_k=5, filter=None):
        self.queries.append((vector, top_k, filter))
        return list(self.candidates[:top_k])


class FakeBackend:
    """Scripted generation backend."""

    def __init__(
        self,
        name: BackendName,
        response: str = "generated answer",
        error: Optional[Exception] = None,
        configured: bool = True,
    ):
        self.name = name
        self.response = response
        self.error = error
        self.configured = configured
        self.calls: list[dict] = []

    def is_configured(self) -> bool:
        return self.configured

    async def generate(self, prompt: str, temperature: float = 0.7, max_tokens: int = 2000) -> str:
        self.calls.append(
            {"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        return self.response


def make_match(
    score: float,
    text: str = "some chunk text",
    vector_id: Optional[str] = None,
    document_id: str = "doc-1",
    user_id: str = "user-1",
    chunk_index: int = 0,
) -> RetrievedMatch:
    return RetrievedMatch(
        id=vector_id or f"{document_id}-chunk-{chunk_index}-{score}",
        score=score,
        metadata=ChunkMetadata(
            document_id=document_id,
            user_id=user_id,
            chunk_index=chunk_index,
            text=text,
        ),
    )


def make_chunks(*texts: str) -> list[DocumentChunk]:
    chunks = []
    offset = 0
    for i, text in enumerate(texts):
        chunks.append(
            DocumentChunk(text=text, chunk_index=i, start_char=offset, end_char=offset + len(text))
        )
        offset += len(text) + 1
    return chunks


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def backends() -> list[FakeBackend]:
    return [
        FakeBackend(BackendName.OPENAI, response="answer from openai"),
        FakeBackend(BackendName.ANTHROPIC, response="answer from anthropic"),
        FakeBackend(BackendName.GEMINI, response="answer from gemini"),
    ]


@pytest.fixture
def rag_service(embedder, vector_store, backends) -> RAGService:
    return RAGService(
        embedder=embedder,
        vector_store=vector_store,
        retrieval=RetrievalService(vector_store),
        generator=GenerationRouter(backends),
    )


@pytest.fixture
def failing_backends() -> list[FakeBackend]:
    return [
        FakeBackend(BackendName.OPENAI, error=ProviderError("openai down")),
        FakeBackend(BackendName.ANTHROPIC, error=ProviderError("anthropic down")),
    ]
