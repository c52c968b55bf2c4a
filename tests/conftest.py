"""Shared test fixtures: sample graphs and contact books."""

from __future__ import annotations

import pytest

from netinsight.domain.models import Contact, NetworkGraph, NetworkNode


def make_graph(
    edges: list[tuple[str, str]],
    nodes: list[str] | None = None,
    **attrs: dict,
) -> NetworkGraph:
    """Graph over *nodes* (default: every edge endpoint, in first-seen order).

    Extra keyword arguments map a node id to NetworkNode fields, e.g.
    ``a={"company": "Acme"}``.
    """
    if nodes is None:
        nodes = []
        for a, b in edges:
            for nid in (a, b):
                if nid not in nodes:
                    nodes.append(nid)
    node_objs = [
        NetworkNode(id=nid, name=nid.upper(), **attrs.get(nid, {}))
        for nid in nodes
    ]
    return NetworkGraph.from_edges(node_objs, edges)


# ── Fixtures ──


@pytest.fixture
def path_graph():
    """A – B – C – D"""
    return make_graph([("A", "B"), ("B", "C"), ("C", "D")])


@pytest.fixture
def star_graph():
    """Hub H with four leaves."""
    return make_graph([("H", "L1"), ("H", "L2"), ("H", "L3"), ("H", "L4")])


@pytest.fixture
def triangle_graph():
    return make_graph([("a", "b"), ("b", "c"), ("a", "c")])


@pytest.fixture
def cycle_graph():
    """Odd cycle of five: 2-regular and not bipartite."""
    return make_graph([("n1", "n2"), ("n2", "n3"), ("n3", "n4"), ("n4", "n5"), ("n5", "n1")])


@pytest.fixture
def barbell_graph():
    """Two triangles joined by the bridge c – d."""
    return make_graph([
        ("a", "b"), ("b", "c"), ("a", "c"),
        ("d", "e"), ("e", "f"), ("d", "f"),
        ("c", "d"),
    ])


@pytest.fixture
def acme_graph():
    """Alice, Bob and Carol at Acme, all connected, plus an outsider."""
    return make_graph(
        [("alice", "bob"), ("bob", "carol"), ("alice", "carol"), ("carol", "dave")],
    )


@pytest.fixture
def acme_contacts():
    return {
        "alice": Contact(id="alice", name="Alice", company="Acme", tags=("AI", "golf")),
        "bob": Contact(id="bob", name="Bob", company="Acme", tags=("ai",)),
        "carol": Contact(id="carol", name="Carol", company="Acme", affiliation="KOF Alumni", tags=(" Ai ",)),
        "dave": Contact(id="dave", name="Dave", company="Initech", affiliation="KOF Alumni", tags=("golf",)),
    }
