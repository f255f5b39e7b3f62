"""Rule-based query preprocessing and keyword scoring.

Everything here is pure and makes no network calls.
"""

import math
import re

from ..models.query import QueryPreprocessingResult

STOP_WORDS = frozenset({
    "a", "about", "after", "all", "also", "am", "an", "and", "any", "are",
    "as", "at", "be", "been", "but", "by", "call", "can", "come", "could",
    "day", "did", "do", "does", "down", "each", "find", "first", "for",
    "from", "get", "had", "has", "have", "he", "her", "him", "his", "i",
    "if", "in", "into", "is", "it", "its", "like", "long", "made", "make",
    "many", "may", "me", "more", "most", "my", "no", "not", "now", "of",
    "oil", "on", "or", "our", "out", "part", "said", "she", "should", "sit",
    "so", "some", "than", "that", "the", "their", "them", "then", "there",
    "these", "they", "this", "those", "to", "two", "up", "very", "was",
    "we", "were", "what", "which", "who", "will", "with", "words", "would",
    "you", "your",
})

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"[^\w\s-]")

# occurrences per keyword treated as the scoring ceiling
_MAX_OCCURRENCES = 10


def _is_keyword(token: str) -> bool:
    if token in STOP_WORDS:
        return False
    return len(token) > 2 or token.isdigit()


def preprocess_query(query: str) -> QueryPreprocessingResult:
    """Normalize a query and extract its keywords.

    Args:
        query: Raw user query.

    Returns:
        Original, normalized, keyword list and cleaned query.
    """
    if not query:
        return QueryPreprocessingResult(original="", normalized="", keywords=[], cleaned="")

    normalized = _WHITESPACE_RE.sub(" ", query.lower().strip())
    tokens = _PUNCTUATION_RE.sub(" ", normalized).split()
    keywords = [t for t in tokens if _is_keyword(t)]

    return QueryPreprocessingResult(
        original=query,
        normalized=normalized,
        keywords=keywords,
        cleaned=" ".join(keywords) or normalized,
    )


def extract_key_phrases(query: str) -> list[str]:
    """Extract contiguous 2-word and 3-word keyword phrases."""
    keywords = preprocess_query(query).keywords

    phrases = [" ".join(keywords[i:i + 2]) for i in range(len(keywords) - 1)]
    if len(keywords) >= 3:
        phrases.extend(" ".join(keywords[i:i + 3]) for i in range(len(keywords) - 2))
    return phrases


def calculate_keyword_score(keywords: list[str], text: str) -> float:
    """Score how well `text` matches `keywords`, in [0, 1].

    Each keyword found k times adds ln(1 + k). The total is normalized
    against 10 occurrences per keyword and multiplied by the fraction of
    keywords that matched at all.
    """
    if not keywords or not text:
        return 0.0

    matched = 0
    total = 0.0
    for keyword in keywords:
        pattern = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
        occurrences = len(pattern.findall(text))
        if occurrences:
            matched += 1
            total += math.log1p(occurrences)

    if not matched:
        return 0.0

    max_possible = len(keywords) * math.log(_MAX_OCCURRENCES)
    return min(1.0, (total / max_possible) * (matched / len(keywords)))
