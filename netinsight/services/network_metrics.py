"""Service: whole-network summary metrics and connector lookups."""

from __future__ import annotations

import logging
from collections import deque

from netinsight.domain.models import (
    CentralityScores,
    IntroductionPath,
    MutualConnection,
    NetworkGraph,
    NetworkMetrics,
)
from netinsight.services.centrality import CentralityEngine

log = logging.getLogger(__name__)


class NetworkMetricsService:
    """Size, density, connectivity and key connectors of a graph."""

    def __init__(
        self,
        centrality: CentralityEngine | None = None,
        *,
        path_sample_size: int = 50,
        max_path_depth: int = 6,
        top_connectors: int = 5,
    ):
        self._centrality = centrality or CentralityEngine()
        self._sample_size = path_sample_size
        self._max_depth = max_path_depth
        self._top_connectors = top_connectors

    def metrics(
        self,
        graph: NetworkGraph,
        centrality: dict[str, CentralityScores] | None = None,
    ) -> NetworkMetrics:
        n = graph.node_count()
        if n == 0:
            return NetworkMetrics()

        edges = graph.edge_count()
        possible = n * (n - 1) / 2
        components = self.connected_components(graph)

        if centrality is not None:
            betweenness = {nid: c.betweenness for nid, c in centrality.items()}
        else:
            betweenness = self._centrality.betweenness(graph)

        return NetworkMetrics(
            total_nodes=n,
            total_edges=edges,
            avg_degree=2 * edges / n,
            network_density=edges / possible if possible else 0.0,
            largest_component_size=len(components[0]) if components else 0,
            avg_path_length=self.average_path_length(graph),
            key_connectors=_by_betweenness(graph.nodes, betweenness)[: self._top_connectors],
        )

    def connected_components(self, graph: NetworkGraph) -> list[list[str]]:
        """Components as sorted id lists, largest first."""
        seen: set[str] = set()
        components: list[list[str]] = []
        for start in sorted(graph.nodes):
            if start in seen:
                continue
            seen.add(start)
            component = [start]
            queue = deque([start])
            while queue:
                current = queue.popleft()
                for nbr in graph.neighbours(current):
                    if nbr not in seen:
                        seen.add(nbr)
                        component.append(nbr)
                        queue.append(nbr)
            components.append(sorted(component))
        components.sort(key=len, reverse=True)
        return components

    def average_path_length(self, graph: NetworkGraph) -> float:
        """Mean hop count between reachable pairs of a node sample."""
        sample = sorted(graph.nodes)[: self._sample_size]
        if len(sample) < 2:
            return 0.0

        total = 0
        pairs = 0
        for i, source in enumerate(sample):
            dist = self._distances(graph, source)
            for target in sample[i + 1:]:
                hops = dist.get(target)
                if hops is not None:
                    total += hops
                    pairs += 1
        return total / pairs if pairs else 0.0

    def key_connectors(
        self,
        graph: NetworkGraph,
        min_degree: int = 3,
        limit: int = 10,
        centrality: dict[str, CentralityScores] | None = None,
    ) -> list[str]:
        if centrality is not None:
            betweenness = {nid: c.betweenness for nid, c in centrality.items()}
        else:
            betweenness = self._centrality.betweenness(graph)
        eligible = [nid for nid in graph.nodes if graph.degree(nid) >= min_degree]
        return _by_betweenness(eligible, betweenness)[:limit]

    def mutual_connections(self, graph: NetworkGraph, contact_id: str) -> list[MutualConnection]:
        if contact_id not in graph.nodes:
            return []
        own = graph.neighbours(contact_id)
        mutuals: list[MutualConnection] = []
        for other in graph.nodes:
            if other == contact_id:
                continue
            shared = sorted(nbr for nbr in graph.neighbours(other) if nbr in own and nbr != other)
            if shared:
                mutuals.append(MutualConnection(contact_id=other, mutual_with=shared))
        mutuals.sort(key=lambda m: m.mutual_count, reverse=True)
        return mutuals

    def introduction_path(
        self,
        graph: NetworkGraph,
        from_id: str,
        to_id: str,
        max_depth: int = 4,
    ) -> IntroductionPath | None:
        """Shortest chain of introductions, at most *max_depth* hops."""
        if from_id == to_id or from_id not in graph.nodes or to_id not in graph.nodes:
            return None

        visited = {from_id}
        queue = deque([[from_id]])
        while queue:
            path = queue.popleft()
            if len(path) - 1 >= max_depth:
                continue
            for nbr in sorted(graph.neighbours(path[-1])):
                if nbr == to_id:
                    return IntroductionPath(path=path + [to_id])
                if nbr not in visited:
                    visited.add(nbr)
                    queue.append(path + [nbr])
        return None

    def introduction_paths(
        self,
        graph: NetworkGraph,
        from_id: str,
        to_id: str,
        max_depth: int = 4,
        max_paths: int = 5,
    ) -> list[IntroductionPath]:
        """Alternative introduction chains, fewest hops first.

        Every simple path of at most *max_depth* hops is considered; the
        *max_paths* shortest are returned.
        """
        if from_id == to_id or from_id not in graph.nodes or to_id not in graph.nodes:
            return []

        found: list[list[str]] = []
        path = [from_id]
        on_path = {from_id}

        def walk() -> None:
            current = path[-1]
            if current == to_id:
                found.append(list(path))
                return
            if len(path) - 1 >= max_depth:
                return
            for nbr in sorted(graph.neighbours(current)):
                if nbr in on_path:
                    continue
                path.append(nbr)
                on_path.add(nbr)
                walk()
                on_path.discard(nbr)
                path.pop()

        walk()
        found.sort(key=len)
        log.debug("Found %d introduction paths %s -> %s", len(found), from_id, to_id)
        return [IntroductionPath(path=p) for p in found[:max_paths]]

    def _distances(self, graph: NetworkGraph, source: str) -> dict[str, int]:
        dist = {source: 0}
        queue = deque([source])
        while queue:
            current = queue.popleft()
            if dist[current] >= self._max_depth:
                continue
            for nbr in graph.neighbours(current):
                if nbr not in dist:
                    dist[nbr] = dist[current] + 1
                    queue.append(nbr)
        return dist


def _by_betweenness(node_ids, betweenness: dict[str, float]) -> list[str]:
    return sorted(node_ids, key=lambda nid: betweenness.get(nid, 0.0), reverse=True)
