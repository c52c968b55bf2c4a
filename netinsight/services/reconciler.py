"""Service: merge attribute and structural communities.

Communities with the same normalised label are one community: members are
unioned, the declared (non-cluster) type wins, and provenance lists are
concatenated.  Also builds the contact → communities index.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping

from netinsight.domain.models import (
    Community,
    CommunityCharacteristics,
    CommunityRef,
    CommunityType,
    Contact,
    ContactCommunityMembership,
    NetworkGraph,
)

log = logging.getLogger(__name__)


class CommunityReconciler:
    """Deduplicate communities and index memberships per contact."""

    def merge(
        self,
        communities: Iterable[Community],
        graph: NetworkGraph | None = None,
    ) -> list[Community]:
        merged: dict[str, Community] = {}
        collisions = 0

        for community in communities:
            key = community.key
            existing = merged.get(key)
            if existing is None:
                # Copy so the inputs are never mutated by later merges.
                merged[key] = replace(
                    community,
                    members=set(community.members),
                    characteristics=community.characteristics.concatenated(
                        CommunityCharacteristics()
                    ),
                )
                continue

            collisions += 1
            existing.members |= community.members
            existing.characteristics = existing.characteristics.concatenated(
                community.characteristics
            )
            if (
                existing.type is CommunityType.NETWORK_CLUSTER
                and community.type is not CommunityType.NETWORK_CLUSTER
            ):
                existing.id = community.id
                existing.type = community.type
                existing.label = community.label
            if graph is not None:
                existing.density = graph.density(existing.members)
                existing.avg_degree = graph.average_degree(existing.members)

        result = sorted(merged.values(), key=lambda c: c.size, reverse=True)
        log.debug("Reconciled %d communities (%d merged)", len(result), collisions)
        return result

    def memberships(
        self,
        communities: list[Community],
        graph: NetworkGraph | None = None,
        contacts: Mapping[str, Contact] | None = None,
    ) -> list[ContactCommunityMembership]:
        index: dict[str, ContactCommunityMembership] = {}

        for community in communities:
            ref = CommunityRef(
                community_id=community.id,
                community_label=community.label,
                community_type=community.type,
            )
            for member in sorted(community.members):
                entry = index.get(member)
                if entry is None:
                    entry = ContactCommunityMembership(
                        contact_id=member,
                        contact_name=_contact_name(member, graph, contacts),
                    )
                    index[member] = entry
                entry.communities.append(ref)

        return sorted(
            (m for m in index.values() if m.communities),
            key=lambda m: len(m.communities),
            reverse=True,
        )


def _contact_name(
    contact_id: str,
    graph: NetworkGraph | None,
    contacts: Mapping[str, Contact] | None,
) -> str:
    if graph is not None and contact_id in graph.nodes:
        return graph.nodes[contact_id].name
    if contacts and contact_id in contacts:
        return contacts[contact_id].name
    return contact_id
