"""Ingest service - chunking and indexing of extracted document text."""

import hashlib
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Optional

from ..text.chunking import chunk_document, chunk_document_with_pages, merge_small_chunks
from .rag_service import RAGService

logger = logging.getLogger(__name__)


class IngestService:
    """Service for indexing documents into vector store."""

    def __init__(
        self,
        rag_service: RAGService,
        docs_path: str = "./docs",
        target_tokens: int = 500,
        overlap_tokens: int = 50,
        min_tokens: int = 0,
    ):
        """Initialize ingest service.

        Args:
            rag_service: Service that embeds and stores chunks.
            docs_path: Path to documents folder.
            target_tokens: Target chunk size in estimated tokens.
            overlap_tokens: Overlap between chunks.
            min_tokens: Chunks smaller than this are merged into the
                previous one; 0 disables merging.
        """
        self._rag = rag_service
        self._docs_path = Path(docs_path)
        self._target_tokens = target_tokens
        self._overlap_tokens = overlap_tokens
        self._min_tokens = min_tokens

        self._loader: Optional["CompositeLoader"] = None

    @property
    def loader(self):
        """Lazy load document loader."""
        if self._loader is None:
            from docqa.infrastructure.document_loaders import CompositeLoader

            self._loader = CompositeLoader()
        return self._loader

    def _compute_hash(self, content: str) -> str:
        """Compute content hash."""
        return hashlib.md5(content.encode()).hexdigest()[:12]

    def ingest_text(
        self,
        text: str,
        document_id: str,
        user_id: str,
        metadata: Optional[dict[str, Any]] = None,
        page_breaks: Optional[list[int]] = None,
    ) -> int:
        """Chunk and index one document's text.

        Args:
            text: Extracted text.
            document_id: Document ID.
            user_id: Owner ID.
            metadata: Extra metadata such as file_name and file_type.
            page_breaks: Offsets where pages begin, for page-aware chunking.

        Returns:
            Number of chunks indexed.
        """
        chunk_meta = {"document_id": document_id}
        if page_breaks:
            chunks = chunk_document_with_pages(
                text, page_breaks, self._target_tokens, self._overlap_tokens, chunk_meta
            )
        else:
            chunks = chunk_document(text, self._target_tokens, self._overlap_tokens, chunk_meta)

        if self._min_tokens > 0:
            chunks = merge_small_chunks(chunks, self._min_tokens)

        if not chunks:
            logger.info(f"No text to index for document {document_id}")
            return 0

        self._rag.index_chunks(chunks, document_id, user_id, metadata)
        return len(chunks)

    def ingest_file(self, file_path: Path, user_id: str) -> int:
        """Load, chunk and index a file.

        The document ID is a hash of the extracted text, so re-ingesting
        an unchanged file overwrites the same vectors.

        Returns:
            Number of chunks indexed.
        """
        document = self.loader.load(file_path)
        if document is None or not document.text.strip():
            logger.warning(f"Nothing extracted from {file_path}")
            return 0

        document_id = self._compute_hash(document.text)
        count = self.ingest_text(
            document.text,
            document_id=document_id,
            user_id=user_id,
            metadata={"file_name": document.file_name, "file_type": document.file_type},
            page_breaks=document.page_breaks,
        )
        logger.info(f"Indexed {count} chunks from {file_path.name} (document {document_id})")
        return count

    def ingest_directory(self, user_id: str) -> int:
        """Index every supported file in the docs folder.

        Returns:
            Number of chunks indexed.
        """
        if not self._docs_path.exists():
            logger.error(f"Docs path not found: {self._docs_path}")
            return 0

        total_indexed = 0
        files = 0
        for file_path in sorted(self._docs_path.iterdir()):
            if not self.loader.supports(file_path):
                continue
            total_indexed += self.ingest_file(file_path, user_id)
            files += 1

        logger.info(f"Indexing complete: {total_indexed} chunks from {files} files")
        return total_indexed


class IngestQueue:
    """Background ingestion with an observable result per job."""

    def __init__(self, ingest_service: IngestService, max_workers: int = 2):
        self._ingest = ingest_service
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="docqa-ingest"
        )

    def submit(
        self,
        text: str,
        document_id: str,
        user_id: str,
        metadata: Optional[dict[str, Any]] = None,
        page_breaks: Optional[list[int]] = None,
    ) -> "Future[int]":
        """Queue a document for ingestion.

        The returned future resolves to the number of chunks indexed or
        raises the ingestion error. Callers may wait on it or ignore it;
        failures are logged either way.
        """
        future = self._executor.submit(
            self._ingest.ingest_text, text, document_id, user_id, metadata, page_breaks
        )
        future.add_done_callback(lambda f: self._log_outcome(document_id, f))
        return future

    def _log_outcome(self, document_id: str, future: "Future[int]") -> None:
        if future.cancelled():
            logger.warning(f"Ingestion of document {document_id} was cancelled")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"Ingestion of document {document_id} failed: {error}")
        else:
            logger.info(f"Ingestion of document {document_id} done: {future.result()} chunks")

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "IngestQueue":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown(wait=True)
