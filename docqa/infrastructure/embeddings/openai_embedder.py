import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from docqa.core.errors import InvalidParameter, ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)


class OpenAIEmbedder:
    """Embeddings from the OpenAI embeddings API."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "text-embedding-3-large",
        dimensions: Optional[int] = 1536,
        timeout: float = 30.0,
    ):
        """Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key; empty means not configured.
            model: Embedding model name.
            dimensions: Output dimensions, None for the model default.
            timeout: Request timeout in seconds.
        """
        self._model = model
        self._dimensions = dimensions
        self._client = OpenAI(api_key=api_key, timeout=timeout) if api_key else None

    def is_configured(self) -> bool:
        return self._client is not None

    def _create(self, inputs: str | list[str]) -> list[list[float]]:
        if self._client is None:
            raise ProviderUnavailable(
                "OpenAI API key is not configured. Set OPENAI_API_KEY."
            )

        kwargs = {"model": self._model, "input": inputs}
        if self._dimensions:
            kwargs["dimensions"] = self._dimensions

        try:
            response = self._client.embeddings.create(**kwargs)
        except OpenAIError as e:
            raise ProviderError(f"Failed to generate embeddings: {e}") from e

        if not response.data:
            raise ProviderError("No embeddings returned from OpenAI API")

        return [item.embedding for item in sorted(response.data, key=lambda d: d.index)]

    def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise InvalidParameter("Text cannot be empty")
        return self._create(text)[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts or any(not t or not t.strip() for t in texts):
            raise InvalidParameter("Texts must be non-empty")

        embeddings = self._create(texts)
        logger.debug(f"Embedded batch of {len(texts)} texts with {self._model}")
        return embeddings
