"""Retrieval service - hybrid semantic + keyword search."""

import logging
from typing import Optional

from ..errors import NoRelevantContent
from ..models.document import MetadataFilter, RetrievedMatch
from ..models.query import QueryPreprocessingResult
from ..protocols.vector_store import VectorStoreProtocol
from ..strategies.scoring import (
    KeywordBlendStrategy,
    RelevanceFallbackStrategy,
    ScoringStrategy,
)
from ..text.query import preprocess_query

logger = logging.getLogger(__name__)


class RetrievalService:
    """Vector search with keyword re-ranking and threshold fallback."""

    def __init__(
        self,
        vector_store: VectorStoreProtocol,
        fallback_ratio: float = 0.5,
        fallback_thresholds: tuple[float, ...] = (0.1, 0.05),
        fallback_top_n: int = 3,
    ):
        """Initialize retrieval service.

        Args:
            vector_store: Vector store.
            fallback_ratio: Multiplier of min_score tried first on fallback.
            fallback_thresholds: Absolute thresholds tried next.
            fallback_top_n: Results kept when no threshold matches.
        """
        self._vector_store = vector_store
        self._fallback_ratio = fallback_ratio
        self._fallback_thresholds = tuple(fallback_thresholds)
        self._fallback_top_n = fallback_top_n

    def _strategies(
        self,
        hybrid: bool,
        semantic_weight: float,
        keyword_weight: float,
        min_score: float,
    ) -> list[ScoringStrategy]:
        strategies: list[ScoringStrategy] = []
        if hybrid:
            strategies.append(KeywordBlendStrategy(semantic_weight, keyword_weight))
        strategies.append(
            RelevanceFallbackStrategy(
                min_score=min_score,
                ratio=self._fallback_ratio,
                thresholds=self._fallback_thresholds,
                top_n=self._fallback_top_n,
            )
        )
        return strategies

    def retrieve(
        self,
        query: str | QueryPreprocessingResult,
        embedding: list[float],
        top_k: int = 5,
        filter: Optional[MetadataFilter] = None,
        use_hybrid: bool = True,
        semantic_weight: float = 0.7,
        keyword_weight: float = 0.3,
        min_score: float = 0.3,
    ) -> list[RetrievedMatch]:
        """Retrieve relevant chunks for a query.

        Hybrid mode only re-ranks the candidates of the semantic query; it
        never surfaces chunks that query missed.

        Args:
            query: Raw or preprocessed query.
            embedding: Query embedding.
            top_k: Number of candidates to fetch.
            filter: Optional document/user restriction.
            use_hybrid: Blend in keyword scores when the query has keywords.
            semantic_weight: Weight of the vector similarity score.
            keyword_weight: Weight of the keyword score.
            min_score: Relevance threshold before fallback.

        Returns:
            Matches sorted by score, highest first.

        Raises:
            NoRelevantContent: If the vector store returned no candidates.
        """
        if isinstance(query, str):
            query = preprocess_query(query)

        candidates = self._vector_store.query(
            embedding,
            top_k=top_k,
            filter=None if filter is None or filter.is_empty() else filter,
        )

        if not candidates:
            raise NoRelevantContent(
                f"No relevant document chunks found for '{query.original[:50]}'"
            )

        hybrid = use_hybrid and bool(query.keywords)
        if hybrid:
            logger.info(
                f"Hybrid search: keywords={query.keywords}, "
                f"semantic weight={semantic_weight}, keyword weight={keyword_weight}"
            )

        results = candidates
        for strategy in self._strategies(hybrid, semantic_weight, keyword_weight, min_score):
            results = strategy.apply(query, results)

        logger.info(
            f"Retrieval: {len(results)}/{len(candidates)} chunks for "
            f"'{query.original[:50]}...'"
        )
        return results
