"""Query domain models."""
from dataclasses import dataclass, field


@dataclass
class QueryPreprocessingResult:
    """Normalized query with extracted keywords."""
    original: str
    normalized: str
    keywords: list[str] = field(default_factory=list)
    cleaned: str = ""  # keywords joined, or normalized when no keywords
