"""Analytics services: centrality, influence, communities, metrics."""

from netinsight.services.attribute_communities import AttributeCommunityBuilder
from netinsight.services.centrality import CentralityEngine
from netinsight.services.influence import InfluenceScorer
from netinsight.services.network_metrics import NetworkMetricsService
from netinsight.services.reconciler import CommunityReconciler
from netinsight.services.structural_clusters import StructuralClusterDetector

__all__ = [
    "AttributeCommunityBuilder",
    "CentralityEngine",
    "InfluenceScorer",
    "NetworkMetricsService",
    "CommunityReconciler",
    "StructuralClusterDetector",
]
