"""Graph source adapter: in-memory (for tests and embedding)."""

from __future__ import annotations

from netinsight.domain.models import Contact, NetworkGraph
from netinsight.ports.graph_source import GraphSourcePort


class InMemoryGraphSource(GraphSourcePort):
    """Hands back a graph that was built elsewhere."""

    def __init__(
        self,
        graph: NetworkGraph | None = None,
        contacts: dict[str, Contact] | None = None,
    ) -> None:
        self._graph = graph or NetworkGraph()
        self._contacts = dict(contacts or {})

    def load(self) -> tuple[NetworkGraph, dict[str, Contact]]:
        return self._graph, dict(self._contacts)
