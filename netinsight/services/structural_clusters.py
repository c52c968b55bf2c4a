"""Service: topology-only community detection via label propagation.

Each node starts alone and repeatedly joins the neighbouring community it
has strictly the most links to.  The number of passes is capped, so the
result records whether propagation actually settled.  Clusters are then
named from what their members share; a cluster whose best name is already
an attribute community is dropped in favour of that community.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Collection, Mapping

from netinsight.domain.models import (
    ClusterDetectionResult,
    Community,
    CommunityCharacteristics,
    CommunityType,
    Contact,
    NetworkGraph,
    normalize_label,
)

log = logging.getLogger(__name__)

POSITION_STOP_WORDS = frozenset({
    "senior", "junior", "head", "chief", "lead", "assistant", "associate",
    "deputy", "vice", "with", "from", "team",
})

_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9&+\-]*")


class StructuralClusterDetector:
    """Label propagation plus characteristic-based cluster naming."""

    def __init__(
        self,
        *,
        max_passes: int = 10,
        org_dominance: float = 0.30,
        keyword_dominance: float = 0.25,
        min_keyword_length: int = 4,
        min_cluster_size: int = 1,
        canonical_order: bool = True,
    ):
        self._max_passes = max_passes
        self._org_dominance = org_dominance
        self._keyword_dominance = keyword_dominance
        self._min_keyword_length = min_keyword_length
        self._min_cluster_size = min_cluster_size
        self._canonical = canonical_order

    # ── public ──

    def detect(
        self,
        graph: NetworkGraph,
        claimed_labels: Collection[str] = (),
        contacts: Mapping[str, Contact] | None = None,
    ) -> ClusterDetectionResult:
        claimed = {normalize_label(label) for label in claimed_labels}
        groups, passes, converged = self.propagate(graph)

        if not converged:
            log.debug("Label propagation stopped after %d passes without settling", passes)

        ordered = sorted(groups, key=lambda g: (-len(g), min(g)))
        communities: list[Community] = []
        for index, members in enumerate(ordered, start=1):
            if len(members) < self._min_cluster_size:
                continue
            community = self._describe(graph, members, index, claimed, contacts or {})
            if community is not None:
                communities.append(community)

        log.debug(
            "Structural clusters: %d groups, %d emitted, %d passes",
            len(groups),
            len(communities),
            passes,
        )
        return ClusterDetectionResult(
            communities=communities, passes=passes, converged=converged
        )

    def propagate(self, graph: NetworkGraph) -> tuple[list[set[str]], int, bool]:
        """Run bounded label propagation.

        Returns the non-empty groups, the number of passes run, and whether
        the final pass made no moves.
        """
        order = self._order(graph.nodes)
        assignment = {nid: nid for nid in order}
        members: dict[str, set[str]] = {nid: {nid} for nid in order}

        passes = 0
        moved = bool(order)
        while moved and passes < self._max_passes:
            moved = False
            passes += 1
            for nid in order:
                current = assignment[nid]
                tally: dict[str, int] = {}
                for nbr in self._order(graph.neighbours(nid)):
                    comm = assignment[nbr]
                    tally[comm] = tally.get(comm, 0) + 1

                best = current
                best_count = tally.get(current, 0)
                for comm, count in tally.items():
                    if count > best_count:
                        best, best_count = comm, count

                if best != current:
                    members[current].discard(nid)
                    members[best].add(nid)
                    assignment[nid] = best
                    moved = True

        groups = [group for group in members.values() if group]
        return groups, passes, not moved

    # ── private helpers ──

    def _order(self, ids: Collection[str]) -> list[str]:
        return sorted(ids) if self._canonical else list(ids)

    def _describe(
        self,
        graph: NetworkGraph,
        members: set[str],
        index: int,
        claimed: set[str],
        contacts: Mapping[str, Contact],
    ) -> Community | None:
        size = len(members)
        companies: list[str] = []
        affiliations: list[str] = []
        keywords: Counter[str] = Counter()

        for nid in sorted(members):
            node = graph.nodes[nid]
            contact = contacts.get(nid)
            company = contact.company if contact else node.company
            affiliation = contact.affiliation if contact else node.affiliation
            position = contact.position if contact else node.position
            if company and company.strip():
                companies.append(company)
            if affiliation and affiliation.strip():
                affiliations.append(affiliation)
            if position:
                keywords.update(self._position_keywords(position))

        company_counts = Counter(companies)
        affiliation_counts = Counter(affiliations)
        top_company = _most_common(company_counts)
        top_affiliation = _most_common(affiliation_counts)

        dominant_org: str | None = None
        dominant_count = 0
        if top_company and company_counts[top_company] >= affiliation_counts.get(top_affiliation or "", 0):
            dominant_org, dominant_count = top_company, company_counts[top_company]
        elif top_affiliation:
            dominant_org, dominant_count = top_affiliation, affiliation_counts[top_affiliation]

        top_keyword = _most_common(keywords)

        if dominant_org and dominant_count / size > self._org_dominance:
            if normalize_label(dominant_org) in claimed:
                return None
            label = dominant_org
        elif top_keyword and keywords[top_keyword] / size > self._keyword_dominance:
            label = f"{top_keyword.capitalize()} Professionals"
        else:
            label = f"Community {index}"

        return Community(
            id=f"{CommunityType.NETWORK_CLUSTER.value}:{index}",
            type=CommunityType.NETWORK_CLUSTER,
            label=label,
            members=set(members),
            density=graph.density(members),
            avg_degree=graph.average_degree(members),
            characteristics=CommunityCharacteristics(
                companies=sorted(company_counts),
                affiliations=sorted(affiliation_counts),
                industry_keywords=[kw for kw, _ in _ranked(keywords)[:5]],
            ),
        )

    def _position_keywords(self, position: str) -> set[str]:
        """Distinct meaningful tokens of a job title."""
        return {
            token
            for token in _TOKEN_RE.findall(position.lower())
            if len(token) >= self._min_keyword_length and token not in POSITION_STOP_WORDS
        }


def _ranked(counts: Counter[str]) -> list[tuple[str, int]]:
    # Highest count first, alphabetical among equals.
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def _most_common(counts: Counter[str]) -> str | None:
    ranked = _ranked(counts)
    return ranked[0][0] if ranked else None
