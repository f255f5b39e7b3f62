import logging
import threading
from typing import Optional

import numpy as np

from docqa.core.models.document import MetadataFilter, RetrievedMatch, VectorRecord

logger = logging.getLogger(__name__)


def cosine_similarity(query_embedding: np.ndarray, embeddings: np.ndarray) -> np.ndarray:
    """Cosine similarity of each row against the query; zero vectors score 0."""
    query_norm = np.linalg.norm(query_embedding)
    row_norms = np.linalg.norm(embeddings, axis=1)
    dots = np.dot(embeddings, query_embedding)
    denom = row_norms * query_norm
    return np.divide(dots, denom, out=np.zeros_like(dots, dtype=float), where=denom != 0)


class InMemoryVectorStore:
    """Vector store kept in process memory, for local runs and tests."""

    def __init__(self):
        self._records: dict[str, VectorRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, records: list[VectorRecord]) -> None:
        with self._lock:
            for record in records:
                self._records[record.id] = record

    def get(self, vector_id: str) -> Optional[VectorRecord]:
        return self._records.get(vector_id)

    def query(
        self,
        vector: list[float],
        top_k: int = 5,
        filter: Optional[MetadataFilter] = None,
    ) -> list[RetrievedMatch]:
        with self._lock:
            candidates = [
                r for r in self._records.values()
                if filter is None or filter.matches(r.metadata)
            ]

        if not candidates:
            return []

        scores = cosine_similarity(
            np.asarray(vector, dtype=float),
            np.asarray([r.vector for r in candidates], dtype=float),
        )
        order = np.argsort(-scores)[:top_k]

        return [
            RetrievedMatch(
                id=candidates[i].id,
                score=float(scores[i]),
                metadata=candidates[i].metadata,
            )
            for i in order
        ]

    def delete_by_ids(self, ids: list[str]) -> None:
        with self._lock:
            for vector_id in ids:
                self._records.pop(vector_id, None)

    def delete_by_filter(self, filter: MetadataFilter) -> None:
        with self._lock:
            doomed = [i for i, r in self._records.items() if filter.matches(r.metadata)]
            for vector_id in doomed:
                del self._records[vector_id]
        logger.debug(f"Deleted {len(doomed)} vectors")

    def count(self) -> int:
        return len(self._records)
