"""Vector store protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.document import MetadataFilter, RetrievedMatch, VectorRecord


@runtime_checkable
class VectorStoreProtocol(Protocol):
    """Protocol for vector storage."""

    def upsert(self, records: list[VectorRecord]) -> None:
        """Insert or replace records, batching requests internally.

        Args:
            records: Vectors with their chunk metadata.
        """
        ...

    def query(
        self,
        vector: list[float],
        top_k: int = 5,
        filter: Optional[MetadataFilter] = None,
    ) -> list[RetrievedMatch]:
        """Search by embedding.

        Args:
            vector: Query vector.
            top_k: Number of results to return.
            filter: Optional document/user restriction.

        Returns:
            Matches sorted by similarity, highest first.
        """
        ...

    def delete_by_ids(self, ids: list[str]) -> None:
        """Delete records by ID."""
        ...

    def delete_by_filter(self, filter: MetadataFilter) -> None:
        """Delete every record matching filter."""
        ...

    def count(self) -> int:
        """Get record count."""
        ...
