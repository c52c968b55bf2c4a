"""Configuration loading and adapter factory.

Reads a YAML config file, builds the graph source adapter it names and
wires the analytics engines into a ``NetworkAnalyticsService``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Walk up from this file (netinsight/config.py) to the project root and load .env
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

from netinsight.ports.graph_source import GraphSourcePort
from netinsight.services.orchestrator import NetworkAnalyticsService
from netinsight.settings import load_settings

log = logging.getLogger(__name__)


def load_config(path: str = "config.yaml") -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(p) as f:
        return yaml.safe_load(f) or {}


# ── Adapter factories ──


def build_graph_source(
    cfg: dict[str, Any],
    *,
    config_dir: str = ".",
    path_override: str | None = None,
) -> GraphSourcePort:
    from netinsight.adapters.sources.json_file import JsonGraphSource

    # An explicit file always wins over the configured adapter.
    if path_override:
        return JsonGraphSource(path_override)

    adapter = cfg.get("adapter", "json")

    if adapter == "json":
        raw_path = cfg.get("path", "data/network.json")
        return JsonGraphSource(str((Path(config_dir) / raw_path).resolve()))

    elif adapter == "in_memory":
        from netinsight.adapters.sources.in_memory import InMemoryGraphSource
        return InMemoryGraphSource()

    raise ValueError(f"Unknown graph source adapter: {adapter}")


# ── Top-level builders ──


def build_service(config_path: str | None = "config.yaml") -> NetworkAnalyticsService:
    """Load config and wire all engines into the analytics service."""
    settings = load_settings(config_path)
    log.debug("  → building analytics service …")
    return NetworkAnalyticsService.from_settings(settings)


def build_source(
    config_path: str | None = "config.yaml",
    *,
    path_override: str | None = None,
) -> GraphSourcePort:
    cfg = load_config(config_path) if config_path else {}
    config_parent = str(Path(config_path).resolve().parent) if config_path else "."
    return build_graph_source(
        cfg.get("source", {}) or {},
        config_dir=config_parent,
        path_override=path_override,
    )
