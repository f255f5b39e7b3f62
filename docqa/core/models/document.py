"""Document domain models."""
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class DocumentChunk:
    """Slice of a document's extracted text, the unit of retrieval.

    Offsets point into the original extracted text.
    """
    text: str
    chunk_index: int
    start_char: int
    end_char: int
    page_number: Optional[int] = None
    document_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ChunkMetadata:
    """Metadata stored next to each chunk vector."""
    document_id: str
    user_id: str
    chunk_index: int
    text: str
    page_number: Optional[int] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    created_at: Optional[str] = None
    start_char: Optional[int] = None
    end_char: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class VectorRecord:
    """Vector plus metadata, as upserted into the vector store."""
    id: str
    vector: list[float]
    metadata: ChunkMetadata


@dataclass
class RetrievedMatch:
    """Search hit from the vector store.

    Score is cosine similarity, or a blended hybrid score after
    keyword re-ranking (not bounded at 1.0).
    """
    id: str
    score: float
    metadata: ChunkMetadata

    @property
    def text(self) -> str:
        return self.metadata.text


@dataclass
class MetadataFilter:
    """Restricts a vector query to documents and/or a user."""
    document_ids: Optional[list[str]] = None
    user_id: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.document_ids and not self.user_id

    def matches(self, metadata: ChunkMetadata) -> bool:
        """Check metadata against this filter."""
        if self.document_ids and metadata.document_id not in self.document_ids:
            return False
        if self.user_id and metadata.user_id != self.user_id:
            return False
        return True


@dataclass
class LoadedDocument:
    """Plain text extracted from a file."""
    text: str
    file_name: str
    file_type: str
    page_breaks: list[int] = field(default_factory=list)
