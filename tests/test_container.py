"""Tests for settings-driven dependency wiring."""

import pytest

from docqa.config.settings import Settings
from docqa.container import (
    Container,
    build_backends,
    build_embedder,
    build_vector_store,
    configure_container,
    container,
)
from docqa.core.models import BackendName
from docqa.core.protocols import EmbedderProtocol, VectorStoreProtocol
from docqa.core.services import GenerationRouter, IngestQueue, IngestService, RAGService
from docqa.infrastructure.embeddings import CachedEmbedder, OpenAIEmbedder
from docqa.infrastructure.embeddings.sentence_transformer import SentenceTransformerEmbedder
from docqa.infrastructure.vector_stores import ChromaVectorStore, InMemoryVectorStore


def make_settings(**overrides) -> Settings:
    values = {
        "openai_api_key": "",
        "anthropic_api_key": "",
        "google_ai_api_key": "",
        "ollama_base_url": "",
        "vector_store": "memory",
        "embedding_provider": "openai",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_container():
    container.reset()
    yield
    container.reset()


def test_build_vector_store():
    assert isinstance(build_vector_store(make_settings()), InMemoryVectorStore)
    assert isinstance(build_vector_store(make_settings(vector_store="chroma")), ChromaVectorStore)

    with pytest.raises(ValueError):
        build_vector_store(make_settings(vector_store="faiss"))


def test_build_embedder():
    assert isinstance(build_embedder(make_settings()), OpenAIEmbedder)
    assert isinstance(
        build_embedder(make_settings(embedding_provider="sentence-transformers")),
        SentenceTransformerEmbedder,
    )

    with pytest.raises(ValueError):
        build_embedder(make_settings(embedding_provider="cohere"))


def test_backends_in_fallback_order():
    names = [b.name for b in build_backends(make_settings())]

    assert names == [
        BackendName.OPENAI,
        BackendName.ANTHROPIC,
        BackendName.GEMINI,
        BackendName.OLLAMA,
    ]


def test_only_credentialed_backends_are_available():
    configure_container(make_settings(anthropic_api_key="sk-ant", google_ai_api_key="g-key"))

    router = container.resolve(GenerationRouter)

    assert router.available_backends() == [BackendName.ANTHROPIC, BackendName.GEMINI]


def test_services_are_wired_as_singletons():
    configure_container(make_settings())

    rag = container.resolve(RAGService)
    assert rag is container.resolve(RAGService)
    assert isinstance(container.resolve(EmbedderProtocol), CachedEmbedder)
    assert isinstance(container.resolve(VectorStoreProtocol), InMemoryVectorStore)
    assert isinstance(container.resolve(IngestService), IngestService)

    queue = container.resolve(IngestQueue)
    queue.shutdown()


def test_unregistered_interface():
    with pytest.raises(KeyError):
        container.resolve(Settings)


def test_reregistering_replaces_shared_instance():
    local = Container()
    local.register(InMemoryVectorStore, InMemoryVectorStore, singleton=True)
    first = local.resolve(InMemoryVectorStore)

    local.register(InMemoryVectorStore, InMemoryVectorStore, singleton=True)

    assert local.resolve(InMemoryVectorStore) is not first


def test_reset_keeps_registrations():
    local = Container()
    local.register(InMemoryVectorStore, InMemoryVectorStore, singleton=True)
    first = local.resolve(InMemoryVectorStore)

    local.reset()

    second = local.resolve(InMemoryVectorStore)
    assert second is not first
    assert second is local.resolve(InMemoryVectorStore)
