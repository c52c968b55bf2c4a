"""Service: communities declared by shared contact attributes.

Groups graph nodes by exact company, exact affiliation and
case-insensitive tag.  Tag groups need more members than company or
affiliation groups before they are emitted.
"""

from __future__ import annotations

import logging
from typing import Mapping

from netinsight.domain.models import (
    Community,
    CommunityCharacteristics,
    CommunityType,
    Contact,
    NetworkGraph,
)

log = logging.getLogger(__name__)


class AttributeCommunityBuilder:
    """Build company / affiliation / tag communities."""

    def __init__(
        self,
        *,
        min_company_size: int = 2,
        min_affiliation_size: int = 2,
        min_tag_size: int = 3,
        canonical_order: bool = True,
    ):
        self._min_company = min_company_size
        self._min_affiliation = min_affiliation_size
        self._min_tag = min_tag_size
        self._canonical = canonical_order

    def build(
        self,
        graph: NetworkGraph,
        contacts: Mapping[str, Contact],
    ) -> list[Community]:
        node_ids = sorted(graph.nodes) if self._canonical else list(graph.nodes)

        by_company: dict[str, set[str]] = {}
        by_affiliation: dict[str, set[str]] = {}
        by_tag: dict[str, set[str]] = {}

        for nid in node_ids:
            contact = contacts.get(nid)
            node = graph.nodes[nid]
            company = contact.company if contact else node.company
            affiliation = contact.affiliation if contact else node.affiliation
            tags = contact.tags if contact else ()

            if company and company.strip():
                by_company.setdefault(company, set()).add(nid)
            if affiliation and affiliation.strip():
                by_affiliation.setdefault(affiliation, set()).add(nid)
            for tag in tags:
                key = tag.strip().lower()
                if key:
                    by_tag.setdefault(key, set()).add(nid)

        communities: list[Community] = []

        for company, members in by_company.items():
            if len(members) >= self._min_company:
                communities.append(self._make(
                    graph, CommunityType.COMPANY, company, members,
                    CommunityCharacteristics(companies=[company]),
                ))

        for affiliation, members in by_affiliation.items():
            if len(members) >= self._min_affiliation:
                communities.append(self._make(
                    graph, CommunityType.AFFILIATION, affiliation, members,
                    CommunityCharacteristics(affiliations=[affiliation]),
                ))

        for tag, members in by_tag.items():
            if len(members) >= self._min_tag:
                communities.append(self._make(
                    graph, CommunityType.TAG, tag[:1].upper() + tag[1:], members,
                    CommunityCharacteristics(tags=[tag]),
                ))

        log.debug(
            "Attribute communities: %d (from %d companies, %d affiliations, %d tags)",
            len(communities),
            len(by_company),
            len(by_affiliation),
            len(by_tag),
        )
        return communities

    @staticmethod
    def _make(
        graph: NetworkGraph,
        ctype: CommunityType,
        label: str,
        members: set[str],
        characteristics: CommunityCharacteristics,
    ) -> Community:
        return Community(
            id=f"{ctype.value}:{label.strip().lower()}",
            type=ctype,
            label=label,
            members=set(members),
            density=graph.density(members),
            avg_degree=graph.average_degree(members),
            characteristics=characteristics,
        )
