"""Pure text processing: chunking and query preprocessing."""
from .chunking import (
    chunk_document,
    chunk_document_with_pages,
    estimate_tokens,
    merge_small_chunks,
)
from .query import (
    STOP_WORDS,
    calculate_keyword_score,
    extract_key_phrases,
    preprocess_query,
)

__all__ = [
    "chunk_document",
    "chunk_document_with_pages",
    "estimate_tokens",
    "merge_small_chunks",
    "STOP_WORDS",
    "calculate_keyword_score",
    "extract_key_phrases",
    "preprocess_query",
]
