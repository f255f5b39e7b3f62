"""Generation domain models."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

FALLBACK_STRATEGY = "fallback"


class BackendName(str, Enum):
    """Known generation backends."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"


@dataclass
class GenerationOptions:
    """Backend selection and sampling options.

    strategy is "fallback" or the name of a single backend.
    """
    strategy: str = FALLBACK_STRATEGY
    preferred_model: Optional[BackendName] = None
    temperature: float = 0.7
    max_tokens: int = 2000


@dataclass
class GenerationResult:
    """Outcome of one generation attempt."""
    text: str
    backend: BackendName
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text.strip())
