"""Tests for indexing and question answering."""

import pytest

from docqa.core.errors import InvalidParameter, InvalidQuery, NoRelevantContent, ProviderError
from docqa.core.models import (
    BackendName,
    DocumentChunk,
    GenerationOptions,
    RAGQueryOptions,
)
from docqa.core.services.generation_service import GenerationRouter
from docqa.core.services.rag_service import (
    RAGService,
    build_rag_prompt,
    chunk_vector_id,
    format_context,
)
from docqa.core.services.retrieval_service import RetrievalService

from tests.conftest import FakeEmbedder, make_chunks, make_match

DOCUMENT = (
    "Quarterly revenue grew steadily across all regions.",
    "The invoice number for the March order is INV-4821.",
    "Revenue projections for next year look healthy.",
)


def make_service(embedder, vector_store, backends) -> RAGService:
    return RAGService(
        embedder=embedder,
        vector_store=vector_store,
        retrieval=RetrievalService(vector_store),
        generator=GenerationRouter(backends),
    )


def test_format_context_numbers_passages():
    context = format_context([make_match(0.9, text="first"), make_match(0.8, text="second")])

    assert context == "[1] first\n\n[2] second"


def test_prompt_contains_question_and_context():
    prompt = build_rag_prompt("Where is it?", "[1] It is here.")

    assert "Question: Where is it?" in prompt
    assert "[1] It is here." in prompt


def test_index_chunks_builds_records(rag_service, vector_store, embedder):
    ids = rag_service.index_chunks(
        make_chunks(*DOCUMENT),
        document_id="doc-1",
        user_id="user-1",
        metadata={"file_name": "report.pdf", "file_type": "pdf", "department": "finance"},
    )

    assert ids == ["doc-1-chunk-0", "doc-1-chunk-1", "doc-1-chunk-2"]
    assert vector_store.count() == 3
    assert len(embedder.batch_calls) == 1

    record = vector_store.get("doc-1-chunk-1")
    assert record.metadata.document_id == "doc-1"
    assert record.metadata.user_id == "user-1"
    assert record.metadata.chunk_index == 1
    assert record.metadata.text == DOCUMENT[1]
    assert record.metadata.file_name == "report.pdf"
    assert record.metadata.file_type == "pdf"
    assert record.metadata.created_at
    assert record.metadata.extra == {"department": "finance"}


def test_index_chunks_empty(rag_service, embedder):
    assert rag_service.index_chunks([], document_id="doc-1", user_id="user-1") == []
    assert embedder.batch_calls == []


@pytest.mark.parametrize("document_id,user_id", [("", "user-1"), ("doc-1", "")])
def test_index_chunks_requires_ids(rag_service, document_id, user_id):
    with pytest.raises(InvalidParameter):
        rag_service.index_chunks(make_chunks("text"), document_id=document_id, user_id=user_id)


def test_index_chunks_embedding_count_mismatch(vector_store, backends):
    class ShortEmbedder(FakeEmbedder):
        def embed_batch(self, texts):
            return super().embed_batch(texts)[:-1]

    service = make_service(ShortEmbedder(), vector_store, backends)

    with pytest.raises(ProviderError):
        service.index_chunks(make_chunks("one.", "two."), document_id="doc-1", user_id="u")
    assert vector_store.count() == 0


def test_reindexing_overwrites(rag_service, vector_store):
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")

    assert vector_store.count() == 3


def test_chunk_page_number_is_stored(rag_service, vector_store):
    chunk = DocumentChunk(text="Page two text.", chunk_index=0, start_char=10, end_char=24, page_number=2)

    rag_service.index_chunks([chunk], document_id="doc-1", user_id="user-1")

    metadata = vector_store.get(chunk_vector_id("doc-1", 0)).metadata
    assert metadata.page_number == 2
    assert (metadata.start_char, metadata.end_char) == (10, 24)


def test_delete_document(rag_service, vector_store):
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")
    rag_service.index_chunks(make_chunks("Other text."), document_id="doc-2", user_id="user-1")

    rag_service.delete_document("doc-1")

    assert vector_store.count() == 1
    assert vector_store.get("doc-2-chunk-0") is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   \n"])
async def test_empty_query_raises(rag_service, query):
    with pytest.raises(InvalidQuery):
        await rag_service.answer(query)


@pytest.mark.asyncio
async def test_answer_from_empty_index_raises(rag_service):
    with pytest.raises(NoRelevantContent):
        await rag_service.answer("What is the invoice number?")


@pytest.mark.asyncio
async def test_answer_round_trip(rag_service, backends):
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")

    result = await rag_service.answer(
        "What is the invoice number?", RAGQueryOptions(document_ids=["doc-1"])
    )

    assert result.answer == "answer from openai"
    assert result.model == BackendName.OPENAI
    assert result.generated
    assert result.sources
    assert all(s.metadata.document_id == "doc-1" for s in result.sources)
    assert result.context.startswith("[1] ")
    assert result.context in backends[0].calls[0]["prompt"]


@pytest.mark.asyncio
async def test_keyword_match_ranks_first(vector_store, backends):
    service = make_service(FakeEmbedder(constant=[1.0, 0.0, 0.0]), vector_store, backends)
    service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")

    result = await service.answer("Which invoice is referenced?")

    assert result.sources[0].text == DOCUMENT[1]
    assert result.sources[0].score > result.sources[1].score


@pytest.mark.asyncio
async def test_answer_filters_by_user(rag_service):
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="alice")
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-2", user_id="bob")

    result = await rag_service.answer("invoice number", RAGQueryOptions(user_id="bob"))

    assert {s.metadata.user_id for s in result.sources} == {"bob"}


@pytest.mark.asyncio
async def test_answer_filters_by_document(rag_service):
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="alice")
    rag_service.index_chunks(make_chunks("An invoice elsewhere."), document_id="doc-2", user_id="alice")

    result = await rag_service.answer("invoice", RAGQueryOptions(document_ids=["doc-2"]))

    assert [s.metadata.document_id for s in result.sources] == ["doc-2"]


@pytest.mark.asyncio
async def test_context_only_answer_when_generation_fails(embedder, vector_store, failing_backends):
    service = make_service(embedder, vector_store, failing_backends)
    service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")

    result = await service.answer("What is the invoice number?")

    assert result.model is None
    assert not result.generated
    assert result.answer == result.context
    assert result.sources


@pytest.mark.asyncio
async def test_preferred_model_failure_falls_back_to_context(rag_service, backends):
    rag_service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")
    backends[1].error = ProviderError("anthropic down")

    result = await rag_service.answer(
        "invoice number",
        RAGQueryOptions(generation=GenerationOptions(preferred_model=BackendName.ANTHROPIC)),
    )

    assert result.model is None
    assert backends[0].calls == []


@pytest.mark.asyncio
async def test_default_options_are_used(embedder, vector_store, backends):
    service = RAGService(
        embedder=embedder,
        vector_store=vector_store,
        retrieval=RetrievalService(vector_store),
        generator=GenerationRouter(backends),
        defaults=RAGQueryOptions(top_k=1),
    )
    service.index_chunks(make_chunks(*DOCUMENT), document_id="doc-1", user_id="user-1")

    result = await service.answer("revenue")

    assert len(result.sources) == 1
    assert embedder.embed_calls == ["revenue"]
