import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Registration:
    factory: Callable[[], Any]
    shared: bool


@dataclass
class Container:
    """Registry of query engine components keyed by protocol or service type.

    Stores, embedders and the generation router are registered as shared
    instances so ingestion and answering see the same index.
    """

    _registrations: dict[type, _Registration] = field(default_factory=dict)
    _instances: dict[type, Any] = field(default_factory=dict)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Bind a component factory to the type callers resolve it by.

        Re-registering an interface replaces its factory and drops any
        instance already built from the old one.

        Args:
            interface: Protocol or service class used as the lookup key.
            factory: Zero-argument callable building the component.
            singleton: Build once and hand out the same instance afterwards.
        """
        self._registrations[interface] = _Registration(factory, singleton)
        self._instances.pop(interface, None)

    def resolve(self, interface: type[T]) -> T:
        """Return the component bound to ``interface``.

        Raises:
            KeyError: If nothing is registered for ``interface``.
        """
        if interface in self._instances:
            return self._instances[interface]

        registration = self._registrations.get(interface)
        if registration is None:
            raise KeyError(f"No component registered for {interface.__name__}")

        instance = registration.factory()
        if registration.shared:
            self._instances[interface] = instance
        return instance

    def reset(self) -> None:
        """Forget built shared instances; registrations are kept."""
        self._instances.clear()


container = Container()


def build_embedder(settings: Settings):
    """Create the configured embedding provider, without cache."""
    if settings.embedding_provider == "sentence-transformers":
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.local_embedding_model)

    if settings.embedding_provider == "openai":
        from .infrastructure.embeddings.openai_embedder import OpenAIEmbedder

        return OpenAIEmbedder(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
            timeout=settings.embedding_timeout,
        )

    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")


def build_vector_store(settings: Settings):
    """Create the configured vector store."""
    from .infrastructure.vector_stores import ChromaVectorStore, InMemoryVectorStore

    if settings.vector_store == "memory":
        return InMemoryVectorStore()

    if settings.vector_store == "chroma":
        return ChromaVectorStore(
            host=settings.chroma_host,
            port=settings.chroma_port,
            collection_name=settings.chroma_collection,
            batch_size=settings.upsert_batch_size,
            timeout=settings.vector_store_timeout,
        )

    raise ValueError(f"Unknown vector store: {settings.vector_store}")


def build_backends(settings: Settings) -> list:
    """Create generation backends in fallback priority order."""
    from .infrastructure.llm import (
        AnthropicBackend,
        GeminiBackend,
        OllamaBackend,
        OpenAIBackend,
    )

    return [
        OpenAIBackend(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.generation_timeout,
        ),
        AnthropicBackend(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            timeout=settings.generation_timeout,
        ),
        GeminiBackend(
            api_key=settings.google_ai_api_key,
            model=settings.gemini_model,
            timeout=settings.generation_timeout,
        ),
        OllamaBackend(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout=settings.generation_timeout,
        ),
    ]


def default_query_options(settings: Settings):
    from .core.models import GenerationOptions, RAGQueryOptions

    return RAGQueryOptions(
        top_k=settings.rag_top_k,
        min_score=settings.rag_min_score,
        use_hybrid=settings.rag_use_hybrid,
        semantic_weight=settings.rag_semantic_weight,
        keyword_weight=settings.rag_keyword_weight,
        generation=GenerationOptions(
            temperature=settings.generation_temperature,
            max_tokens=settings.generation_max_tokens,
        ),
    )


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.vector_store import VectorStoreProtocol
    from .core.services.generation_service import GenerationRouter
    from .core.services.ingest_service import IngestQueue, IngestService
    from .core.services.rag_service import RAGService
    from .core.services.retrieval_service import RetrievalService
    from .infrastructure.embeddings import CachedEmbedder, InMemoryEmbeddingCache

    container.register(
        EmbedderProtocol,
        lambda: CachedEmbedder(build_embedder(settings), InMemoryEmbeddingCache()),
        singleton=True,
    )

    container.register(
        VectorStoreProtocol,
        lambda: build_vector_store(settings),
        singleton=True,
    )

    container.register(
        GenerationRouter,
        lambda: GenerationRouter(build_backends(settings)),
        singleton=True,
    )

    container.register(
        RetrievalService,
        lambda: RetrievalService(
            vector_store=container.resolve(VectorStoreProtocol),
            fallback_ratio=settings.rag_fallback_ratio,
            fallback_thresholds=tuple(settings.rag_fallback_thresholds),
            fallback_top_n=settings.rag_fallback_top_n,
        ),
        singleton=True,
    )

    container.register(
        RAGService,
        lambda: RAGService(
            embedder=container.resolve(EmbedderProtocol),
            vector_store=container.resolve(VectorStoreProtocol),
            retrieval=container.resolve(RetrievalService),
            generator=container.resolve(GenerationRouter),
            defaults=default_query_options(settings),
        ),
        singleton=True,
    )

    container.register(
        IngestService,
        lambda: IngestService(
            rag_service=container.resolve(RAGService),
            docs_path=settings.docs_path,
            target_tokens=settings.chunk_target_tokens,
            overlap_tokens=settings.chunk_overlap_tokens,
            min_tokens=settings.chunk_min_tokens,
        ),
        singleton=True,
    )

    container.register(
        IngestQueue,
        lambda: IngestQueue(
            container.resolve(IngestService), max_workers=settings.ingest_workers
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
