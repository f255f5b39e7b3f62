"""Command line interface for indexing documents and asking questions."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx

from docqa.config.settings import Settings, settings
from docqa.container import configure_container, container
from docqa.core.errors import DocQAError, NoRelevantContent
from docqa.core.models import BackendName, RAGQueryOptions, RAGResult
from docqa.core.services.generation_service import GenerationRouter
from docqa.core.services.ingest_service import IngestService
from docqa.core.services.rag_service import RAGService

logger = logging.getLogger(__name__)


def check_services(settings: Settings) -> bool:
    """Probe the vector store and local model server.

    Returns:
        True if every reachable-by-network dependency answered.
    """
    ok = True

    if settings.vector_store == "chroma":
        url = f"http://{settings.chroma_host}:{settings.chroma_port}/api/v2/heartbeat"
        try:
            resp = httpx.get(url, timeout=5)
            resp.raise_for_status()
            logger.info(f"ChromaDB is up at {settings.chroma_host}:{settings.chroma_port}")
        except httpx.HTTPError as e:
            logger.error(f"ChromaDB not available: {e}")
            ok = False

    if settings.ollama_base_url:
        base_url = settings.ollama_base_url.replace("/v1", "")
        try:
            resp = httpx.get(f"{base_url}/api/tags", timeout=5)
            resp.raise_for_status()
            models = [m["name"] for m in resp.json().get("models", [])]
            if any(settings.ollama_model in m for m in models):
                logger.info(f"Ollama model {settings.ollama_model} is ready")
            else:
                logger.warning(f"Ollama is up but model {settings.ollama_model} is not pulled")
        except httpx.HTTPError as e:
            logger.error(f"Ollama not available: {e}")
            ok = False

    return ok


def print_result(result: RAGResult) -> None:
    if result.generated:
        print(result.answer)
        print(f"\n(model: {result.model.value})")
    else:
        print("No generated answer available, relevant passages:\n")
        print(result.context)

    print("\nSources:")
    for i, source in enumerate(result.sources, 1):
        meta = source.metadata
        where = meta.file_name or meta.document_id
        page = f", page {meta.page_number}" if meta.page_number else ""
        print(f"  [{i}] {where}{page} (score {source.score:.2f})")


def cmd_check(args: argparse.Namespace) -> int:
    """Check command - check dependencies and list backends."""
    configure_container(settings)
    router = container.resolve(GenerationRouter)
    available = router.available_backends()
    if available:
        logger.info(f"Generation backends: {', '.join(b.value for b in available)}")
    else:
        logger.warning("No generation backend configured, answers will be context-only")
    return 0 if check_services(settings) else 1


def cmd_ingest(args: argparse.Namespace) -> int:
    """Ingest command - index a file or the docs folder."""
    configure_container(settings)
    ingest_service = container.resolve(IngestService)

    if args.path:
        count = ingest_service.ingest_file(Path(args.path), user_id=args.user_id)
    else:
        count = ingest_service.ingest_directory(user_id=args.user_id)

    logger.info(f"Indexed {count} chunks")
    return 0


def cmd_ask(args: argparse.Namespace) -> int:
    """Ask command - answer a question from indexed documents."""
    configure_container(settings)
    rag_service = container.resolve(RAGService)

    options = RAGQueryOptions(
        document_ids=args.document_id or None,
        user_id=args.user_id,
        top_k=args.top_k or settings.rag_top_k,
        min_score=args.min_score if args.min_score is not None else settings.rag_min_score,
        use_hybrid=not args.semantic_only,
        semantic_weight=settings.rag_semantic_weight,
        keyword_weight=settings.rag_keyword_weight,
    )
    options.generation.temperature = settings.generation_temperature
    options.generation.max_tokens = settings.generation_max_tokens
    if args.model:
        options.generation.preferred_model = BackendName(args.model)

    try:
        result = asyncio.run(rag_service.answer(args.question, options))
    except NoRelevantContent:
        print("No relevant content found in the indexed documents.")
        return 2

    print_result(result)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete command - remove a document's vectors."""
    configure_container(settings)
    container.resolve(RAGService).delete_document(args.document_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docqa", description="Document question answering")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Probe vector store and backends")
    check.set_defaults(func=cmd_check)

    ingest = sub.add_parser("ingest", help="Index a file or the docs folder")
    ingest.add_argument("path", nargs="?", help="File to index (default: docs folder)")
    ingest.add_argument("--user-id", default="local")
    ingest.set_defaults(func=cmd_ingest)

    ask = sub.add_parser("ask", help="Answer a question")
    ask.add_argument("question")
    ask.add_argument("--document-id", action="append", help="Restrict to document (repeatable)")
    ask.add_argument("--user-id")
    ask.add_argument("--top-k", type=int)
    ask.add_argument("--min-score", type=float)
    ask.add_argument("--semantic-only", action="store_true")
    ask.add_argument("--model", choices=[b.value for b in BackendName])
    ask.set_defaults(func=cmd_ask)

    delete = sub.add_parser("delete", help="Delete a document's vectors")
    delete.add_argument("document_id")
    delete.set_defaults(func=cmd_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")

    try:
        return args.func(args)
    except DocQAError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
