"""Service: per-node centrality measures.

Degree, Brandes betweenness, local clustering coefficient and
power-iteration eigenvector centrality over an unweighted, undirected
``NetworkGraph``.  All functions are pure; nothing is cached here.
"""

from __future__ import annotations

import logging
import math
from collections import deque

import numpy as np

from netinsight.domain.models import CentralityScores, NetworkGraph

log = logging.getLogger(__name__)


class CentralityEngine:
    """Compute degree, betweenness, clustering and eigenvector centrality."""

    def __init__(
        self,
        *,
        eigenvector_tolerance: float = 1e-6,
        eigenvector_max_iterations: int = 100,
    ):
        self._tolerance = eigenvector_tolerance
        self._max_iterations = eigenvector_max_iterations

    # ── public ──

    def compute(self, graph: NetworkGraph) -> dict[str, CentralityScores]:
        """Return the four measures for every node, in graph node order."""
        if not graph.nodes:
            return {}

        degree = self.degree(graph)
        betweenness = self.betweenness(graph)
        clustering = self.clustering(graph)
        eigenvector = self.eigenvector(graph)

        return {
            nid: CentralityScores(
                degree=degree[nid],
                betweenness=betweenness[nid],
                clustering=clustering[nid],
                eigenvector=eigenvector[nid],
            )
            for nid in graph.nodes
        }

    def degree(self, graph: NetworkGraph) -> dict[str, float]:
        n = graph.node_count()
        return {nid: graph.degree(nid) / n for nid in graph.nodes}

    def betweenness(self, graph: NetworkGraph) -> dict[str, float]:
        """Brandes' algorithm, normalised to [0, 1]."""
        scores = {nid: 0.0 for nid in graph.nodes}

        for source in graph.nodes:
            # BFS: shortest-path DAG rooted at source
            stack: list[str] = []
            preds: dict[str, list[str]] = {source: []}
            sigma = {source: 1.0}
            dist = {source: 0}
            queue = deque([source])

            while queue:
                v = queue.popleft()
                stack.append(v)
                for w in sorted(graph.neighbours(v)):
                    if w not in dist:
                        dist[w] = dist[v] + 1
                        sigma[w] = 0.0
                        preds[w] = []
                        queue.append(w)
                    if dist[w] == dist[v] + 1:
                        sigma[w] += sigma[v]
                        preds[w].append(v)

            # Accumulation, farthest nodes first
            delta = dict.fromkeys(stack, 0.0)
            while stack:
                w = stack.pop()
                for v in preds[w]:
                    delta[v] += (sigma[v] / sigma[w]) * (1.0 + delta[w])
                if w != source:
                    scores[w] += delta[w]

        n = graph.node_count()
        # Every unordered pair was counted once from each endpoint.
        scale = 0.5 * (2.0 / ((n - 1) * (n - 2)) if n > 2 else 1.0)
        return {nid: value * scale for nid, value in scores.items()}

    def clustering(self, graph: NetworkGraph) -> dict[str, float]:
        result: dict[str, float] = {}
        for nid in graph.nodes:
            neighbours = sorted(graph.neighbours(nid))
            k = len(neighbours)
            if k < 2:
                result[nid] = 0.0
                continue
            triangles = 0
            for i, a in enumerate(neighbours):
                adj_a = graph.neighbours(a)
                for b in neighbours[i + 1:]:
                    if b in adj_a:
                        triangles += 1
            result[nid] = 2.0 * triangles / (k * (k - 1))
        return result

    def eigenvector(self, graph: NetworkGraph) -> dict[str, float]:
        """Power iteration from the uniform vector, L2-normalised each step."""
        node_ids = list(graph.nodes)
        n = len(node_ids)
        if n == 0:
            return {}

        index = {nid: i for i, nid in enumerate(node_ids)}
        src: list[int] = []
        dst: list[int] = []
        for nid in node_ids:
            for nbr in graph.neighbours(nid):
                src.append(index[nid])
                dst.append(index[nbr])
        src_idx = np.asarray(src, dtype=np.int64)
        dst_idx = np.asarray(dst, dtype=np.int64)

        x = np.full(n, 1.0 / math.sqrt(n))
        iterations = 0
        for iterations in range(1, self._max_iterations + 1):
            summed = np.bincount(src_idx, weights=x[dst_idx], minlength=n)
            norm = float(np.linalg.norm(summed))
            if norm == 0.0:
                # No edges to propagate along: keep the current vector.
                break
            updated = summed / norm
            max_diff = float(np.max(np.abs(updated - x)))
            x = updated
            if max_diff < self._tolerance:
                break

        log.debug("Eigenvector centrality: %d nodes, %d iterations", n, iterations)
        return {nid: float(x[i]) for nid, i in index.items()}
