"""netinsight: influence ranking and community detection for contact networks."""

from netinsight.domain.models import (
    CentralityScores,
    Community,
    CommunityReport,
    CommunityType,
    Contact,
    ContactCommunityMembership,
    InfluenceScore,
    IntroductionPath,
    NetworkGraph,
    NetworkNode,
)
from netinsight.services.orchestrator import (
    NetworkAnalyticsService,
    get_communities,
    get_influence_scores,
)

__all__ = [
    "CentralityScores",
    "Community",
    "CommunityReport",
    "CommunityType",
    "Contact",
    "ContactCommunityMembership",
    "InfluenceScore",
    "IntroductionPath",
    "NetworkGraph",
    "NetworkNode",
    "NetworkAnalyticsService",
    "get_communities",
    "get_influence_scores",
]
