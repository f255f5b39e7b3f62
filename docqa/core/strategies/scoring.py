"""Scoring strategies applied to retrieved matches before answering."""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace

from ..models.document import RetrievedMatch
from ..models.query import QueryPreprocessingResult
from ..text.query import calculate_keyword_score

logger = logging.getLogger(__name__)


class ScoringStrategy(ABC):
    """Base class for scoring strategies."""

    @abstractmethod
    def apply(
        self, query: QueryPreprocessingResult, results: list[RetrievedMatch]
    ) -> list[RetrievedMatch]:
        """Apply strategy to results."""
        ...


class KeywordBlendStrategy(ScoringStrategy):
    """Blend semantic scores with keyword overlap and re-rank."""

    def __init__(self, semantic_weight: float = 0.7, keyword_weight: float = 0.3):
        """Initialize strategy.

        Args:
            semantic_weight: Weight of the vector similarity score.
            keyword_weight: Weight of the keyword score.
        """
        self._semantic_weight = semantic_weight
        self._keyword_weight = keyword_weight

    def apply(
        self, query: QueryPreprocessingResult, results: list[RetrievedMatch]
    ) -> list[RetrievedMatch]:
        """Replace each score with the blended score, highest first."""
        if not results or not query.keywords:
            return results

        blended = []
        for result in results:
            keyword_score = calculate_keyword_score(query.keywords, result.text)
            score = (
                self._semantic_weight * result.score
                + self._keyword_weight * keyword_score
            )
            blended.append(replace(result, score=score))

        blended.sort(key=lambda r: r.score, reverse=True)

        if logger.isEnabledFor(logging.DEBUG):
            top_scores = ", ".join(f"{r.score:.2f}" for r in blended[:3])
            logger.debug(f"Hybrid top-3 scores: [{top_scores}]")

        return blended


class RelevanceFallbackStrategy(ScoringStrategy):
    """Filter by min score, relaxing the threshold when nothing passes.

    Thresholds tried in order: min_score, min_score * ratio, then each of
    the absolute thresholds. If none yields a match, the top_n results are
    kept regardless of score.
    """

    def __init__(
        self,
        min_score: float = 0.3,
        ratio: float = 0.5,
        thresholds: tuple[float, ...] = (0.1, 0.05),
        top_n: int = 3,
    ):
        self._min_score = min_score
        self._ratio = ratio
        self._thresholds = thresholds
        self._top_n = top_n

    def apply(
        self, query: QueryPreprocessingResult, results: list[RetrievedMatch]
    ) -> list[RetrievedMatch]:
        """Keep results above the first threshold that yields any."""
        if not results:
            return results

        filtered = [r for r in results if r.score >= self._min_score]
        if filtered:
            return filtered

        for threshold in (self._min_score * self._ratio, *self._thresholds):
            filtered = [r for r in results if r.score >= threshold]
            if filtered:
                logger.info(
                    f"Using fallback threshold {threshold:.3f} "
                    f"({len(filtered)} chunks, original threshold {self._min_score})"
                )
                return filtered

        top = sorted(results, key=lambda r: r.score, reverse=True)[: self._top_n]
        logger.warning(
            f"No chunks above any threshold, using top {len(top)} regardless of score"
        )
        return top
