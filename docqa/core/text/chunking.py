"""Sentence-bounded document chunking with overlap."""

import logging
import math
import re
from dataclasses import replace
from typing import Any, Optional

from ..errors import InvalidParameter
from ..models.document import DocumentChunk

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4

# Sentence ends at a run of terminators; a leading run of terminators
# becomes its own piece so the pieces tile the whole text.
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]*|[.!?]+")


def estimate_tokens(text: str) -> int:
    """Approximate token count at ~4 characters per token."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _make_chunk(
    text: str,
    start: int,
    chunk_index: int,
    metadata: dict[str, Any],
) -> Optional[DocumentChunk]:
    """Build a chunk from a raw buffer starting at offset `start`."""
    stripped = text.strip()
    if not stripped:
        return None

    leading = len(text) - len(text.lstrip())
    start_char = start + leading
    extra = {k: v for k, v in metadata.items() if k not in ("page_number", "document_id")}

    return DocumentChunk(
        text=stripped,
        chunk_index=chunk_index,
        start_char=start_char,
        end_char=start_char + len(stripped),
        page_number=metadata.get("page_number"),
        document_id=metadata.get("document_id"),
        metadata=extra,
    )


def chunk_document(
    text: str,
    target_tokens: int = 500,
    overlap_tokens: int = 50,
    metadata: Optional[dict[str, Any]] = None,
) -> list[DocumentChunk]:
    """Split text into overlapping, sentence-bounded chunks.

    Sentences are accumulated until the next one would push the estimated
    size over `target_tokens`. Each new chunk starts with the tail
    `overlap_tokens / target_tokens` fraction of the previous chunk.

    Args:
        text: Extracted document text.
        target_tokens: Target chunk size in estimated tokens.
        overlap_tokens: Overlap between consecutive chunks.
        metadata: Optional `document_id`/`page_number` plus extra fields.

    Returns:
        Chunks with contiguous zero-based indexes.

    Raises:
        InvalidParameter: If sizes are out of range.
    """
    if target_tokens <= 0:
        raise InvalidParameter("target_tokens must be greater than 0")
    if overlap_tokens < 0 or overlap_tokens >= target_tokens:
        raise InvalidParameter(
            "overlap_tokens must be non-negative and less than target_tokens"
        )

    if not text or not text.strip():
        return []

    metadata = metadata or {}

    if estimate_tokens(text) <= target_tokens:
        chunk = _make_chunk(text, 0, 0, metadata)
        return [replace(chunk, start_char=0, end_char=len(text))]

    chunks: list[DocumentChunk] = []
    buffer = ""
    buffer_start = 0

    for match in _SENTENCE_RE.finditer(text):
        sentence = match.group()

        if buffer and estimate_tokens(buffer) + estimate_tokens(sentence) > target_tokens:
            chunk = _make_chunk(buffer, buffer_start, len(chunks), metadata)
            if chunk:
                chunks.append(chunk)

            overlap_chars = math.floor(overlap_tokens / target_tokens * len(buffer))
            overlap = buffer[len(buffer) - overlap_chars:] if overlap_chars else ""
            # buffer is a contiguous slice of text, so the overlap ends
            # exactly where this sentence begins
            buffer_start = match.start() - len(overlap)
            buffer = overlap + sentence
        else:
            if not buffer:
                buffer_start = match.start()
            buffer += sentence

    chunk = _make_chunk(buffer, buffer_start, len(chunks), metadata)
    if chunk:
        chunks.append(chunk)

    return chunks


def chunk_document_with_pages(
    text: str,
    page_breaks: list[int],
    target_tokens: int = 500,
    overlap_tokens: int = 50,
    metadata: Optional[dict[str, Any]] = None,
) -> list[DocumentChunk]:
    """Chunk each page separately and number chunks across the document.

    Args:
        text: Extracted document text.
        page_breaks: Character offsets where a new page begins.
        target_tokens: Target chunk size in estimated tokens.
        overlap_tokens: Overlap between consecutive chunks.
        metadata: Metadata attached to every chunk.

    Returns:
        Chunks tagged with 1-based page numbers.
    """
    if not page_breaks:
        return chunk_document(text, target_tokens, overlap_tokens, metadata)

    bounds = sorted({b for b in page_breaks if 0 < b < len(text)})
    starts = [0] + bounds
    ends = bounds + [len(text)]

    chunks: list[DocumentChunk] = []
    for page_number, (start, end) in enumerate(zip(starts, ends), 1):
        page_meta = {**(metadata or {}), "page_number": page_number}
        for chunk in chunk_document(text[start:end], target_tokens, overlap_tokens, page_meta):
            chunks.append(
                replace(
                    chunk,
                    chunk_index=len(chunks),
                    start_char=chunk.start_char + start,
                    end_char=chunk.end_char + start,
                )
            )

    logger.debug(f"Chunked {len(starts)} pages into {len(chunks)} chunks")
    return chunks


def merge_small_chunks(
    chunks: list[DocumentChunk], min_tokens: int = 100
) -> list[DocumentChunk]:
    """Fold chunks smaller than `min_tokens` into the previous chunk.

    Indexes are renumbered so they stay contiguous.
    """
    merged: list[DocumentChunk] = []

    for chunk in chunks:
        if merged and estimate_tokens(chunk.text) < min_tokens:
            previous = merged[-1]
            merged[-1] = replace(
                previous,
                text=f"{previous.text} {chunk.text}",
                end_char=chunk.end_char,
            )
        else:
            merged.append(chunk)

    return [replace(c, chunk_index=i) for i, c in enumerate(merged)]
