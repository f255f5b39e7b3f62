"""RAG service - indexing and grounded question answering."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ..errors import InvalidParameter, InvalidQuery, NoRelevantContent, ProviderError
from ..models.document import (
    ChunkMetadata,
    DocumentChunk,
    MetadataFilter,
    RetrievedMatch,
    VectorRecord,
)
from ..models.rag import RAGQueryOptions, RAGResult, RAGSource
from ..protocols.embedder import EmbedderProtocol
from ..protocols.vector_store import VectorStoreProtocol
from ..text.query import preprocess_query
from .generation_service import GenerationRouter
from .retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

RAG_PROMPT = """You are a helpful AI assistant that answers questions based on the provided document context.

Context from documents:
{context}

Question: {question}

Answer using only the context above. Cite the passages you rely on by their bracket numbers, e.g. [1], [2].
If the context does not contain enough information to answer the question, say so explicitly."""

_RESERVED_METADATA = {
    "document_id",
    "user_id",
    "chunk_index",
    "text",
    "page_number",
    "file_name",
    "file_type",
    "created_at",
    "start_char",
    "end_char",
}


def build_rag_prompt(question: str, context: str) -> str:
    """Build the grounding prompt for a question and its context."""
    return RAG_PROMPT.format(context=context, question=question)


def format_context(matches: list[RetrievedMatch]) -> str:
    """Number matches as [1], [2], ... separated by blank lines."""
    return "\n\n".join(f"[{i}] {m.text}" for i, m in enumerate(matches, 1))


def chunk_vector_id(document_id: str, chunk_index: int) -> str:
    return f"{document_id}-chunk-{chunk_index}"


class RAGService:
    """Indexes chunks and answers questions from them."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        vector_store: VectorStoreProtocol,
        retrieval: RetrievalService,
        generator: GenerationRouter,
        defaults: Optional[RAGQueryOptions] = None,
    ):
        """Initialize RAG service.

        Args:
            embedder: Embedding service (usually cached).
            vector_store: Vector store.
            retrieval: Hybrid retrieval service.
            generator: Generation backend router.
            defaults: Query options used when a call passes none.
        """
        self._embedder = embedder
        self._vector_store = vector_store
        self._retrieval = retrieval
        self._generator = generator
        self._defaults = defaults or RAGQueryOptions()

    def index_chunks(
        self,
        chunks: list[DocumentChunk],
        document_id: str,
        user_id: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> list[str]:
        """Embed chunks in one batch and upsert them.

        Vector IDs are derived from document ID and chunk index, so
        re-indexing a document overwrites its previous vectors.

        Args:
            chunks: Chunks of one document.
            document_id: Owning document.
            user_id: Owning user.
            metadata: Extra fields such as file_name and file_type.

        Returns:
            IDs of the upserted vectors.
        """
        if not chunks:
            return []
        if not document_id or not user_id:
            raise InvalidParameter("document_id and user_id are required")

        metadata = metadata or {}
        embeddings = self._embedder.embed_batch([c.text for c in chunks])
        if len(embeddings) != len(chunks):
            raise ProviderError(
                f"Embedding count mismatch: {len(embeddings)} for {len(chunks)} chunks"
            )

        created_at = datetime.now(timezone.utc).isoformat()
        extra_meta = {k: v for k, v in metadata.items() if k not in _RESERVED_METADATA}

        records = []
        for chunk, vector in zip(chunks, embeddings):
            records.append(
                VectorRecord(
                    id=chunk_vector_id(document_id, chunk.chunk_index),
                    vector=vector,
                    metadata=ChunkMetadata(
                        document_id=document_id,
                        user_id=user_id,
                        chunk_index=chunk.chunk_index,
                        text=chunk.text,
                        page_number=chunk.page_number,
                        file_name=metadata.get("file_name"),
                        file_type=metadata.get("file_type"),
                        created_at=created_at,
                        start_char=chunk.start_char,
                        end_char=chunk.end_char,
                        extra={**chunk.metadata, **extra_meta},
                    ),
                )
            )

        self._vector_store.upsert(records)
        logger.info(f"Indexed {len(records)} chunks for document {document_id}")
        return [r.id for r in records]

    def delete_document(self, document_id: str) -> None:
        """Delete every vector of a document."""
        if not document_id:
            raise InvalidParameter("document_id is required")
        self._vector_store.delete_by_filter(MetadataFilter(document_ids=[document_id]))
        logger.info(f"Deleted vectors for document {document_id}")

    async def answer(
        self, query: str, options: Optional[RAGQueryOptions] = None
    ) -> RAGResult:
        """Answer a question from indexed documents.

        If every generation backend fails, the retrieved context itself is
        returned as the answer and `model` is None.

        Args:
            query: User question.
            options: Filters, retrieval and generation options.

        Returns:
            Answer with sources and context.

        Raises:
            InvalidQuery: If the query is empty.
            NoRelevantContent: If nothing was retrieved.
        """
        if not query or not query.strip():
            raise InvalidQuery("Query cannot be empty")

        options = options or self._defaults

        preprocessed = preprocess_query(query)
        logger.info(
            f"Query preprocessing: '{query[:50]}' -> keywords: {preprocessed.keywords}"
        )

        embedding = self._embedder.embed(query)

        matches = self._retrieval.retrieve(
            preprocessed,
            embedding,
            top_k=options.top_k,
            filter=MetadataFilter(document_ids=options.document_ids, user_id=options.user_id),
            use_hybrid=options.use_hybrid,
            semantic_weight=options.semantic_weight,
            keyword_weight=options.keyword_weight,
            min_score=options.min_score,
        )
        if not matches:
            raise NoRelevantContent("No relevant document chunks found for the query")

        sources = [RAGSource(text=m.text, score=m.score, metadata=m.metadata) for m in matches]
        context = format_context(matches)
        prompt = build_rag_prompt(query, context)

        try:
            result = await self._generator.generate(prompt, options.generation)
        except Exception as e:
            logger.error(f"Generation failed, returning context-only answer: {e}")
            return RAGResult(answer=context, sources=sources, context=context)

        return RAGResult(
            answer=result.text,
            sources=sources,
            context=context,
            model=result.backend,
        )
