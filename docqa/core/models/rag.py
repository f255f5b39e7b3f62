"""RAG query models."""
from dataclasses import dataclass, field
from typing import Optional

from .document import ChunkMetadata
from .generation import BackendName, GenerationOptions


@dataclass
class RAGQueryOptions:
    """Options for a single RAG query."""
    document_ids: Optional[list[str]] = None
    user_id: Optional[str] = None
    top_k: int = 5
    min_score: float = 0.3
    use_hybrid: bool = True
    semantic_weight: float = 0.7
    keyword_weight: float = 0.3
    generation: GenerationOptions = field(default_factory=GenerationOptions)


@dataclass(frozen=True)
class RAGSource:
    """Chunk cited by an answer."""
    text: str
    score: float
    metadata: ChunkMetadata


@dataclass(frozen=True)
class RAGResult:
    """Answer with its grounding context.

    model is None when every backend failed and the answer is the raw
    context.
    """
    answer: str
    sources: list[RAGSource]
    context: str
    model: Optional[BackendName] = None

    @property
    def generated(self) -> bool:
        return self.model is not None
