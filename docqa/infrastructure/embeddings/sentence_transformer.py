import logging
from functools import cached_property

import numpy as np
from sentence_transformers import SentenceTransformer

from docqa.core.errors import InvalidParameter, ProviderError

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Local embeddings, no credentials needed."""

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2"):
        self._model_name = model_name

    @cached_property
    def model(self) -> SentenceTransformer:
        logger.info(f"Loading embedding model: {self._model_name}")
        return SentenceTransformer(self._model_name)

    def warmup(self) -> None:
        _ = self.model
        logger.info("Embedding model warmed up")

    def is_configured(self) -> bool:
        return True

    def _encode(self, texts: list[str]) -> np.ndarray:
        try:
            vectors = self.model.encode(texts, convert_to_numpy=True, normalize_embeddings=True)
        except (RuntimeError, ValueError) as e:
            raise ProviderError(f"Local embedding failed: {e}") from e

        if vectors.size == 0:
            raise ProviderError("Embedding model returned no vectors")
        return vectors

    def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise InvalidParameter("Text cannot be empty")
        return self._encode([text])[0].tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise InvalidParameter("Texts must be non-empty")
        return self._encode(texts).tolist()
