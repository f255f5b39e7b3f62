"""Scoring and filtering strategies."""
from .scoring import KeywordBlendStrategy, RelevanceFallbackStrategy, ScoringStrategy

__all__ = [
    "ScoringStrategy",
    "KeywordBlendStrategy",
    "RelevanceFallbackStrategy",
]
