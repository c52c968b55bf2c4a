"""Port: where a prebuilt contact graph comes from."""

from __future__ import annotations

from abc import ABC, abstractmethod

from netinsight.domain.models import Contact, NetworkGraph


class GraphSourcePort(ABC):
    """Supply one analytics snapshot: the graph and its contact attributes."""

    @abstractmethod
    def load(self) -> tuple[NetworkGraph, dict[str, Contact]]:
        """Return the graph and a node id → Contact lookup."""
