import logging
from dataclasses import asdict
from typing import Any, Optional

import requests

from docqa.core.errors import ProviderError
from docqa.core.models.document import (
    ChunkMetadata,
    MetadataFilter,
    RetrievedMatch,
    VectorRecord,
)

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)
_FIELDS = {
    "document_id",
    "user_id",
    "chunk_index",
    "page_number",
    "file_name",
    "file_type",
    "created_at",
    "start_char",
    "end_char",
}


def metadata_to_chroma(metadata: ChunkMetadata) -> dict[str, Any]:
    """Flatten chunk metadata; Chroma rejects None and nested values."""
    flat = {k: v for k, v in asdict(metadata).items() if k in _FIELDS}
    flat.update(metadata.extra)
    return {k: v for k, v in flat.items() if isinstance(v, _SCALAR_TYPES)}


def metadata_from_chroma(data: dict[str, Any], text: str) -> ChunkMetadata:
    data = dict(data or {})
    known = {k: data.pop(k) for k in list(data) if k in _FIELDS}
    return ChunkMetadata(
        document_id=str(known.pop("document_id", "")),
        user_id=str(known.pop("user_id", "")),
        chunk_index=int(known.pop("chunk_index", 0)),
        text=text or "",
        extra=data,
        **known,
    )


def filter_to_where(filter: MetadataFilter) -> Optional[dict[str, Any]]:
    """Translate a metadata filter into a Chroma `where` clause."""
    clauses = []
    if filter.document_ids:
        clauses.append({"document_id": {"$in": list(filter.document_ids)}})
    if filter.user_id:
        clauses.append({"user_id": {"$eq": filter.user_id}})

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaVectorStore:
    """Vector store using ChromaDB HTTP API."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8001,
        collection_name: str = "documents",
        tenant: str = "default_tenant",
        database: str = "default_database",
        batch_size: int = 100,
        timeout: float = 30.0,
    ):
        """Initialize ChromaDB client.

        Args:
            host: ChromaDB host.
            port: ChromaDB port.
            collection_name: Collection name.
            tenant: Tenant name.
            database: Database name.
            batch_size: Max records per upsert request.
            timeout: Request timeout in seconds.
        """
        self._base_url = f"http://{host}:{port}/api/v2"
        self._tenant = tenant
        self._database = database
        self._collection_name = collection_name
        self._collection_id: Optional[str] = None
        self._batch_size = batch_size
        self._timeout = timeout

    @property
    def _collections_url(self) -> str:
        return f"{self._base_url}/tenants/{self._tenant}/databases/{self._database}/collections"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            resp = requests.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ProviderError(f"ChromaDB request failed: {e}") from e
        return resp

    def _ensure_collection(self) -> str:
        """Get or create collection, return ID."""
        if self._collection_id:
            return self._collection_id

        resp = self._request("GET", self._collections_url)
        for col in resp.json():
            if col["name"] == self._collection_name:
                self._collection_id = col["id"]
                return self._collection_id

        resp = self._request(
            "POST",
            self._collections_url,
            json={"name": self._collection_name, "metadata": {"hnsw:space": "cosine"}},
        )
        self._collection_id = resp.json()["id"]
        logger.info(f"Created collection: {self._collection_name}")
        return self._collection_id

    def upsert(self, records: list[VectorRecord]) -> None:
        """Upsert records in batches."""
        if not records:
            return

        col_id = self._ensure_collection()
        for i in range(0, len(records), self._batch_size):
            batch = records[i : i + self._batch_size]
            self._request(
                "POST",
                f"{self._collections_url}/{col_id}/upsert",
                json={
                    "ids": [r.id for r in batch],
                    "embeddings": [list(r.vector) for r in batch],
                    "documents": [r.metadata.text for r in batch],
                    "metadatas": [metadata_to_chroma(r.metadata) for r in batch],
                },
            )
            logger.debug(f"Upserted batch: {i + len(batch)}/{len(records)}")

    def query(
        self,
        vector: list[float],
        top_k: int = 5,
        filter: Optional[MetadataFilter] = None,
    ) -> list[RetrievedMatch]:
        """Search by embedding."""
        col_id = self._ensure_collection()
        payload: dict[str, Any] = {
            "query_embeddings": [list(vector)],
            "n_results": top_k,
            "include": ["documents", "metadatas", "distances"],
        }
        where = filter_to_where(filter) if filter else None
        if where:
            payload["where"] = where

        data = self._request("POST", f"{self._collections_url}/{col_id}/query", json=payload).json()

        results = []
        if data.get("ids") and data["ids"][0]:
            for i, vector_id in enumerate(data["ids"][0]):
                distance = data["distances"][0][i]
                results.append(
                    RetrievedMatch(
                        id=vector_id,
                        score=1.0 - distance,
                        metadata=metadata_from_chroma(
                            data["metadatas"][0][i], data["documents"][0][i]
                        ),
                    )
                )

        return results

    def delete_by_ids(self, ids: list[str]) -> None:
        if not ids:
            return
        col_id = self._ensure_collection()
        self._request("POST", f"{self._collections_url}/{col_id}/delete", json={"ids": ids})

    def delete_by_filter(self, filter: MetadataFilter) -> None:
        where = filter_to_where(filter)
        if where is None:
            raise ProviderError("Refusing to delete with an empty filter")
        col_id = self._ensure_collection()
        self._request("POST", f"{self._collections_url}/{col_id}/delete", json={"where": where})

    def count(self) -> int:
        """Get record count."""
        col_id = self._ensure_collection()
        return int(self._request("GET", f"{self._collections_url}/{col_id}/count").json())
