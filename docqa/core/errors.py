"""Error types raised by the RAG core."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.generation import GenerationResult


class DocQAError(Exception):
    """Base class for all docqa errors."""


class InvalidParameter(DocQAError, ValueError):
    """Caller passed an invalid parameter (chunk sizes, missing ids)."""


class InvalidQuery(DocQAError, ValueError):
    """Query is empty or whitespace-only."""


class ProviderUnavailable(DocQAError):
    """External provider has no credentials configured."""


class ProviderError(DocQAError):
    """External call failed or returned a malformed/empty response."""


class NoRelevantContent(DocQAError):
    """Retrieval found no candidate chunks for the query."""


class AllBackendsFailed(DocQAError):
    """Every attempted generation backend failed."""

    def __init__(self, attempts: list["GenerationResult"] | None = None):
        """Initialize error.

        Args:
            attempts: Failed attempts, one per backend, in the order tried.
        """
        self.attempts = attempts or []
        if self.attempts:
            reasons = "; ".join(
                f"{a.backend.value}: {a.error}" for a in self.attempts
            )
            message = f"All generation backends failed ({reasons})"
        else:
            message = "No generation backend is configured"
        super().__init__(message)
