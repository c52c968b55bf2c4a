"""Graph source adapter: a JSON export of contacts with resolved connections.

Expected shape::

    {"contacts": [
        {"id": "c1", "name": "Alice", "company": "Acme",
         "affiliation": null, "position": "CTO", "tags": ["ai"],
         "connections": ["c2", "c3"]},
        ...
    ]}

A bare JSON array of contact objects is accepted too.  ``connections``
must reference ids present in the same file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from netinsight.domain.models import Contact, NetworkGraph, NetworkNode
from netinsight.ports.graph_source import GraphSourcePort

log = logging.getLogger(__name__)


class JsonGraphSource(GraphSourcePort):
    """Read a graph snapshot from a JSON file."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    def load(self) -> tuple[NetworkGraph, dict[str, Contact]]:
        if not self._path.exists():
            raise FileNotFoundError(f"Graph file not found: {self._path}")

        payload = json.loads(self._path.read_text(encoding="utf-8"))
        records = payload.get("contacts", []) if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise ValueError(f"Expected a list of contacts in {self._path}")
        graph, contacts = parse_contacts(records)
        log.info(
            "Loaded %d contacts and %d connections from %s",
            graph.node_count(),
            graph.edge_count(),
            self._path,
        )
        return graph, contacts


def parse_contacts(records: list[dict[str, Any]]) -> tuple[NetworkGraph, dict[str, Contact]]:
    nodes: list[NetworkNode] = []
    contacts: dict[str, Contact] = {}
    edges: list[tuple[str, str]] = []

    for rec in records:
        _check_record(rec)
        cid = str(rec["id"])
        name = rec.get("name") or cid
        nodes.append(NetworkNode(
            id=cid,
            name=name,
            company=rec.get("company"),
            affiliation=rec.get("affiliation"),
            position=rec.get("position"),
        ))
        contacts[cid] = Contact(
            id=cid,
            name=name,
            company=rec.get("company"),
            affiliation=rec.get("affiliation"),
            position=rec.get("position"),
            tags=tuple(rec.get("tags") or ()),
        )
        for other in rec.get("connections") or ():
            other = str(other)
            if other != cid:
                edges.append((cid, other))

    for a, b in edges:
        assert b in contacts, f"contact {a!r} connects to unknown id {b!r}"

    return NetworkGraph.from_edges(nodes, edges), contacts


_TEXT_FIELDS = ("name", "company", "affiliation", "position")


def _check_record(rec: Any) -> None:
    """Reject contact records whose fields have the wrong JSON types."""
    if not isinstance(rec, dict) or "id" not in rec:
        raise ValueError(f"Contact record must be an object with an 'id': {rec!r}")
    cid = rec["id"]
    for name in _TEXT_FIELDS:
        value = rec.get(name)
        if value is not None and not isinstance(value, str):
            raise ValueError(
                f"Contact {cid!r}: '{name}' must be a string or null, got {type(value).__name__}"
            )
    for name in ("tags", "connections"):
        value = rec.get(name)
        if value is None:
            continue
        if not isinstance(value, list):
            raise ValueError(f"Contact {cid!r}: '{name}' must be a list, got {type(value).__name__}")
        if name == "tags" and not all(isinstance(tag, str) for tag in value):
            raise ValueError(f"Contact {cid!r}: every tag must be a string")
