"""Pure domain models — zero external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


# ── Graph contract ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NetworkNode:
    """A contact as it appears in the network graph."""

    id: str
    name: str
    company: str | None = None
    affiliation: str | None = None
    position: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "company": self.company,
            "affiliation": self.affiliation,
            "position": self.position,
        }


@dataclass(frozen=True)
class NetworkGraph:
    """Undirected contact graph supplied by the graph-construction layer.

    ``adjacency`` must be symmetric, free of self-loops and reference only
    known nodes.  The graph is never mutated once built.
    """

    nodes: Mapping[str, NetworkNode] = field(default_factory=dict)
    adjacency: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def from_edges(
        cls,
        nodes: Iterable[NetworkNode],
        edges: Iterable[tuple[str, str]],
    ) -> "NetworkGraph":
        """Build a graph from nodes and undirected ``(a, b)`` pairs."""
        node_map = {n.id: n for n in nodes}
        adj: dict[str, set[str]] = {nid: set() for nid in node_map}
        for a, b in edges:
            adj.setdefault(a, set()).add(b)
            adj.setdefault(b, set()).add(a)
        return cls(
            nodes=node_map,
            adjacency={nid: frozenset(nbrs) for nid, nbrs in adj.items()},
        )

    # ── helpers ──

    def neighbours(self, node_id: str) -> frozenset[str]:
        return self.adjacency.get(node_id, frozenset())

    def degree(self, node_id: str) -> int:
        return len(self.neighbours(node_id))

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return sum(len(nbrs) for nbrs in self.adjacency.values()) // 2

    def edges(self) -> list[tuple[str, str]]:
        """Each undirected edge once, as a sorted ``(a, b)`` pair."""
        return sorted(
            (a, b)
            for a, nbrs in self.adjacency.items()
            for b in nbrs
            if a < b
        )

    def internal_edge_count(self, members: set[str] | frozenset[str]) -> int:
        """Edges with both endpoints inside *members*."""
        total = 0
        for nid in members:
            total += sum(1 for nbr in self.neighbours(nid) if nbr in members)
        return total // 2

    def density(self, members: set[str] | frozenset[str]) -> float:
        size = len(members)
        possible = size * (size - 1) / 2
        if possible == 0:
            return 0.0
        return self.internal_edge_count(members) / possible

    def average_degree(self, members: set[str] | frozenset[str]) -> float:
        if not members:
            return 0.0
        return sum(self.degree(nid) for nid in members) / len(members)

    def check_contract(self) -> None:
        """Fail fast on a graph that breaks the adjacency invariants."""
        for nid, node in self.nodes.items():
            assert node.id == nid, f"node key {nid!r} does not match id {node.id!r}"
        for nid, nbrs in self.adjacency.items():
            assert nid in self.nodes, f"adjacency references unknown node {nid!r}"
            assert nid not in nbrs, f"self-loop on {nid!r}"
            for nbr in nbrs:
                assert nbr in self.nodes, f"{nid!r} links to unknown node {nbr!r}"
                assert nid in self.adjacency.get(nbr, ()), (
                    f"asymmetric edge {nid!r} -> {nbr!r}"
                )

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "adjacency": {nid: sorted(nbrs) for nid, nbrs in self.adjacency.items()},
        }


@dataclass(frozen=True)
class Contact:
    """Declared attributes of a contact, used for attribute communities."""

    id: str
    name: str = ""
    company: str | None = None
    affiliation: str | None = None
    position: str | None = None
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "company": self.company,
            "affiliation": self.affiliation,
            "position": self.position,
            "tags": list(self.tags),
        }


# ── Influence ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CentralityScores:
    """The four centrality measures for one node."""

    degree: float = 0.0
    betweenness: float = 0.0
    clustering: float = 0.0
    eigenvector: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "degree": self.degree,
            "betweenness": self.betweenness,
            "clustering": self.clustering,
            "eigenvector": self.eigenvector,
        }


@dataclass
class InfluenceScore:
    """Ranked influence of one node. ``score`` is on a 0–100 scale."""

    node_id: str
    raw_score: float
    rank: int = 0
    factors: CentralityScores = field(default_factory=CentralityScores)

    @property
    def score(self) -> float:
        return self.raw_score * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_id": self.node_id,
            "score": self.score,
            "rank": self.rank,
            "factors": self.factors.to_dict(),
        }


# ── Communities ─────────────────────────────────────────────────────────────

class CommunityType(str, Enum):
    COMPANY = "company"
    AFFILIATION = "affiliation"
    TAG = "tag"
    NETWORK_CLUSTER = "network_cluster"


@dataclass
class CommunityCharacteristics:
    """Provenance of a community: what its members have in common."""

    companies: list[str] = field(default_factory=list)
    affiliations: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    industry_keywords: list[str] = field(default_factory=list)

    def concatenated(self, other: "CommunityCharacteristics") -> "CommunityCharacteristics":
        return CommunityCharacteristics(
            companies=self.companies + other.companies,
            affiliations=self.affiliations + other.affiliations,
            tags=self.tags + other.tags,
            industry_keywords=self.industry_keywords + other.industry_keywords,
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "companies": list(self.companies),
            "affiliations": list(self.affiliations),
            "tags": list(self.tags),
            "industry_keywords": list(self.industry_keywords),
        }


@dataclass
class Community:
    """A cohesive node set, either declared (attribute) or structural."""

    id: str
    type: CommunityType
    label: str
    members: set[str] = field(default_factory=set)
    density: float = 0.0
    avg_degree: float = 0.0
    characteristics: CommunityCharacteristics = field(
        default_factory=CommunityCharacteristics
    )

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def key(self) -> str:
        """Normalised label used to detect duplicates."""
        return normalize_label(self.label)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "label": self.label,
            "members": sorted(self.members),
            "size": self.size,
            "density": self.density,
            "avg_degree": self.avg_degree,
            "characteristics": self.characteristics.to_dict(),
        }


@dataclass(frozen=True)
class CommunityRef:
    community_id: str
    community_label: str
    community_type: CommunityType

    def to_dict(self) -> dict[str, str]:
        return {
            "community_id": self.community_id,
            "community_label": self.community_label,
            "community_type": self.community_type.value,
        }


@dataclass
class ContactCommunityMembership:
    """Inverse index entry: every community one contact belongs to."""

    contact_id: str
    contact_name: str
    communities: list[CommunityRef] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contact_id": self.contact_id,
            "contact_name": self.contact_name,
            "communities": [c.to_dict() for c in self.communities],
        }


@dataclass
class ClusterDetectionResult:
    """Structural clusters plus how the bounded propagation ended."""

    communities: list[Community] = field(default_factory=list)
    passes: int = 0
    converged: bool = True


@dataclass
class CommunityReport:
    communities: list[Community] = field(default_factory=list)
    memberships: list[ContactCommunityMembership] = field(default_factory=list)
    cluster_passes: int = 0
    clusters_converged: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "communities": [c.to_dict() for c in self.communities],
            "memberships": [m.to_dict() for m in self.memberships],
            "cluster_passes": self.cluster_passes,
            "clusters_converged": self.clusters_converged,
        }


# ── Whole-graph metrics ─────────────────────────────────────────────────────

@dataclass
class NetworkMetrics:
    total_nodes: int = 0
    total_edges: int = 0
    avg_degree: float = 0.0
    network_density: float = 0.0
    largest_component_size: int = 0
    avg_path_length: float = 0.0
    key_connectors: list[str] = field(default_factory=list)  # top node ids by betweenness

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "avg_degree": self.avg_degree,
            "network_density": self.network_density,
            "largest_component_size": self.largest_component_size,
            "avg_path_length": self.avg_path_length,
            "key_connectors": list(self.key_connectors),
        }


@dataclass
class MutualConnection:
    contact_id: str
    mutual_with: list[str] = field(default_factory=list)

    @property
    def mutual_count(self) -> int:
        return len(self.mutual_with)


@dataclass
class IntroductionPath:
    """Chain of contacts from one person to another, endpoints included."""

    path: list[str] = field(default_factory=list)

    @property
    def hops(self) -> int:
        return max(len(self.path) - 1, 0)

    @property
    def intermediaries(self) -> list[str]:
        return self.path[1:-1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "hops": self.hops,
            "intermediaries": self.intermediaries,
        }


def normalize_label(label: str) -> str:
    return label.strip().lower()
