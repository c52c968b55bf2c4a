"""Service: combine centrality measures into one ranked influence score."""

from __future__ import annotations

import logging

from netinsight.domain.models import CentralityScores, InfluenceScore

log = logging.getLogger(__name__)


class InfluenceScorer:
    """Weighted sum of centrality factors, ranked highest first."""

    def __init__(
        self,
        *,
        degree_weight: float = 0.30,
        betweenness_weight: float = 0.40,
        clustering_weight: float = 0.15,
        eigenvector_weight: float = 0.15,
    ):
        self._w_degree = degree_weight
        self._w_betweenness = betweenness_weight
        self._w_clustering = clustering_weight
        self._w_eigenvector = eigenvector_weight

    def combine(self, factors: CentralityScores) -> float:
        return (
            factors.degree * self._w_degree
            + factors.betweenness * self._w_betweenness
            + factors.clustering * self._w_clustering
            + factors.eigenvector * self._w_eigenvector
        )

    def rank(self, centrality: dict[str, CentralityScores]) -> list[InfluenceScore]:
        """Score every node and assign ranks ``1..n``.

        ``sorted`` is stable, so tied nodes keep the order in which
        *centrality* lists them.
        """
        scores = [
            InfluenceScore(node_id=nid, raw_score=self.combine(f), factors=f)
            for nid, f in centrality.items()
        ]
        scores.sort(key=lambda s: s.raw_score, reverse=True)
        for position, item in enumerate(scores, start=1):
            item.rank = position

        log.debug("Ranked %d nodes by influence", len(scores))
        return scores

    def score_map(self, centrality: dict[str, CentralityScores]) -> dict[str, float]:
        """Node id → score on the 0–100 scale."""
        return {s.node_id: s.score for s in self.rank(centrality)}
