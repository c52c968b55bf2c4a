"""Orchestrator: the call boundary for every analytics pass.

The engines are stateless.  This service wires them together, checks the
graph contract on entry, and memoises results per input snapshot.  The
cache key is a SHA-256 fingerprint of the graph (plus the contact
attributes for community runs), so an unchanged contact book is never
recomputed while any edit produces a fresh pass.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
from collections import OrderedDict
from typing import Any, Callable, Iterable, Mapping

from netinsight.domain.models import (
    CentralityScores,
    CommunityReport,
    Contact,
    InfluenceScore,
    IntroductionPath,
    MutualConnection,
    NetworkGraph,
    NetworkMetrics,
)
from netinsight.services.attribute_communities import AttributeCommunityBuilder
from netinsight.services.centrality import CentralityEngine
from netinsight.services.influence import InfluenceScorer
from netinsight.services.network_metrics import NetworkMetricsService
from netinsight.services.reconciler import CommunityReconciler
from netinsight.services.structural_clusters import StructuralClusterDetector
from netinsight.settings import Settings

log = logging.getLogger(__name__)


class NetworkAnalyticsService:
    """Top-level entry point for influence, community and metric queries."""

    def __init__(
        self,
        centrality: CentralityEngine | None = None,
        scorer: InfluenceScorer | None = None,
        attribute_builder: AttributeCommunityBuilder | None = None,
        cluster_detector: StructuralClusterDetector | None = None,
        reconciler: CommunityReconciler | None = None,
        *,
        cache_size: int = 32,
        validate_input: bool = True,
    ):
        self._centrality = centrality or CentralityEngine()
        self._scorer = scorer or InfluenceScorer()
        self._attributes = attribute_builder or AttributeCommunityBuilder()
        self._clusters = cluster_detector or StructuralClusterDetector()
        self._reconciler = reconciler or CommunityReconciler()
        self._metrics = NetworkMetricsService(self._centrality)

        self._cache_size = cache_size
        self._validate = validate_input
        self._cache: OrderedDict[tuple[str, str], Any] = OrderedDict()

    @classmethod
    def from_settings(cls, settings: Settings) -> "NetworkAnalyticsService":
        cl = settings.clustering
        return cls(
            centrality=CentralityEngine(
                eigenvector_tolerance=settings.centrality.eigenvector_tolerance,
                eigenvector_max_iterations=settings.centrality.eigenvector_max_iterations,
            ),
            scorer=InfluenceScorer(
                degree_weight=settings.influence.degree_weight,
                betweenness_weight=settings.influence.betweenness_weight,
                clustering_weight=settings.influence.clustering_weight,
                eigenvector_weight=settings.influence.eigenvector_weight,
            ),
            attribute_builder=AttributeCommunityBuilder(
                min_company_size=settings.communities.min_company_size,
                min_affiliation_size=settings.communities.min_affiliation_size,
                min_tag_size=settings.communities.min_tag_size,
                canonical_order=cl.canonical_order,
            ),
            cluster_detector=StructuralClusterDetector(
                max_passes=cl.max_passes,
                org_dominance=cl.org_dominance,
                keyword_dominance=cl.keyword_dominance,
                min_keyword_length=cl.min_keyword_length,
                min_cluster_size=cl.min_cluster_size,
                canonical_order=cl.canonical_order,
            ),
            cache_size=settings.analytics.cache_size,
            validate_input=settings.analytics.validate_input,
        )

    # ── influence ──

    def centrality(self, graph: NetworkGraph) -> dict[str, CentralityScores]:
        self._check(graph)
        return self._memoised(
            "centrality", graph_fingerprint(graph), lambda: self._centrality.compute(graph)
        )

    def rank_influence(self, graph: NetworkGraph) -> list[InfluenceScore]:
        self._check(graph)
        return self._memoised(
            "influence",
            graph_fingerprint(graph),
            lambda: self._scorer.rank(self.centrality(graph)),
        )

    def get_influence_scores(self, graph: NetworkGraph) -> dict[str, float]:
        """Node id → influence on a 0–100 scale."""
        return {s.node_id: s.score for s in self.rank_influence(graph)}

    # ── communities ──

    def get_communities(
        self,
        graph: NetworkGraph,
        contacts: Mapping[str, Contact] | Iterable[Contact] = (),
    ) -> CommunityReport:
        self._check(graph)
        lookup = _contact_lookup(contacts)
        key = f"{graph_fingerprint(graph)}:{contacts_fingerprint(lookup)}"
        return self._memoised("communities", key, lambda: self._build_communities(graph, lookup))

    def _build_communities(
        self,
        graph: NetworkGraph,
        contacts: dict[str, Contact],
    ) -> CommunityReport:
        declared = self._attributes.build(graph, contacts)
        detection = self._clusters.detect(
            graph,
            claimed_labels=[c.key for c in declared],
            contacts=contacts,
        )
        if not detection.converged:
            log.warning(
                "Structural clustering hit the %d-pass cap without converging",
                detection.passes,
            )

        # Both producers must finish before reconciliation starts.
        communities = self._reconciler.merge(declared + detection.communities, graph)
        memberships = self._reconciler.memberships(communities, graph, contacts)

        log.info(
            "Communities: %d declared, %d structural, %d after merge, %d members indexed",
            len(declared),
            len(detection.communities),
            len(communities),
            len(memberships),
        )
        return CommunityReport(
            communities=communities,
            memberships=memberships,
            cluster_passes=detection.passes,
            clusters_converged=detection.converged,
        )

    # ── metrics ──

    def get_metrics(self, graph: NetworkGraph) -> NetworkMetrics:
        self._check(graph)
        return self._memoised(
            "metrics",
            graph_fingerprint(graph),
            lambda: self._metrics.metrics(graph, self.centrality(graph)),
        )

    def key_connectors(self, graph: NetworkGraph, min_degree: int = 3, limit: int = 10) -> list[str]:
        return self._metrics.key_connectors(
            graph, min_degree=min_degree, limit=limit, centrality=self.centrality(graph)
        )

    def mutual_connections(self, graph: NetworkGraph, contact_id: str) -> list[MutualConnection]:
        self._check(graph)
        return self._metrics.mutual_connections(graph, contact_id)

    def introduction_path(
        self, graph: NetworkGraph, from_id: str, to_id: str, max_depth: int = 4
    ) -> IntroductionPath | None:
        self._check(graph)
        return self._metrics.introduction_path(graph, from_id, to_id, max_depth=max_depth)

    def introduction_paths(
        self,
        graph: NetworkGraph,
        from_id: str,
        to_id: str,
        max_depth: int = 4,
        max_paths: int = 5,
    ) -> list[IntroductionPath]:
        self._check(graph)
        return self._metrics.introduction_paths(
            graph, from_id, to_id, max_depth=max_depth, max_paths=max_paths
        )

    # ── cache ──

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_info(self) -> dict[str, int]:
        return {"entries": len(self._cache), "max_entries": self._cache_size}

    def _check(self, graph: NetworkGraph) -> None:
        if self._validate:
            graph.check_contract()

    def _memoised(self, kind: str, fingerprint: str, compute: Callable[[], Any]) -> Any:
        if self._cache_size == 0:
            return compute()

        key = (kind, fingerprint)
        if key in self._cache:
            log.debug("Cache hit for %s (%s)", kind, fingerprint[:12])
            self._cache.move_to_end(key)
        else:
            self._cache[key] = compute()
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)
        # Callers get their own copy; cached results stay pristine.
        return copy.deepcopy(self._cache[key])


# ── fingerprints ──


def graph_fingerprint(graph: NetworkGraph) -> str:
    """Content hash of a graph, sensitive to node order (it breaks rank ties)."""
    payload = json.dumps(graph.to_dict(), sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def contacts_fingerprint(contacts: Mapping[str, Contact]) -> str:
    payload = json.dumps(
        [contacts[cid].to_dict() for cid in sorted(contacts)], sort_keys=True
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _contact_lookup(contacts: Mapping[str, Contact] | Iterable[Contact]) -> dict[str, Contact]:
    if isinstance(contacts, Mapping):
        return dict(contacts)
    return {c.id: c for c in contacts}


# ── module-level convenience API ──

_default_service: NetworkAnalyticsService | None = None


def default_service() -> NetworkAnalyticsService:
    global _default_service
    if _default_service is None:
        _default_service = NetworkAnalyticsService()
    return _default_service


def get_influence_scores(graph: NetworkGraph) -> dict[str, float]:
    return default_service().get_influence_scores(graph)


def get_communities(
    graph: NetworkGraph,
    contacts: Mapping[str, Contact] | Iterable[Contact] = (),
) -> CommunityReport:
    return default_service().get_communities(graph, contacts)
