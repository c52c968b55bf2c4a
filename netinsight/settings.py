"""YAML settings loader with environment variable overlay.

Env vars take precedence over YAML values.
Env var naming: NETINSIGHT__{section}__{key} (double underscore separator)
e.g., NETINSIGHT__CLUSTERING__MAX_PASSES overrides clustering.max_passes
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


@dataclass
class InfluenceConfig:
    degree_weight: float = 0.30
    betweenness_weight: float = 0.40
    clustering_weight: float = 0.15
    eigenvector_weight: float = 0.15

    def validate(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"influence.{f.name} must be non-negative")
        # Factors lie in [0, 1], so scores stay within 0..100 only while this holds.
        total = sum(getattr(self, f.name) for f in fields(self))
        if total > 1.0 + 1e-9:
            raise ValueError(f"influence weights must sum to at most 1 (got {total:g})")


@dataclass
class CentralityConfig:
    eigenvector_tolerance: float = 1e-6
    eigenvector_max_iterations: int = 100

    def validate(self) -> None:
        if self.eigenvector_tolerance <= 0:
            raise ValueError("centrality.eigenvector_tolerance must be positive")
        if self.eigenvector_max_iterations < 1:
            raise ValueError("centrality.eigenvector_max_iterations must be >= 1")


@dataclass
class CommunityConfig:
    min_company_size: int = 2
    min_affiliation_size: int = 2
    min_tag_size: int = 3

    def validate(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 1:
                raise ValueError(f"communities.{f.name} must be >= 1")


@dataclass
class ClusteringConfig:
    max_passes: int = 10
    org_dominance: float = 0.30
    keyword_dominance: float = 0.25
    min_keyword_length: int = 4
    min_cluster_size: int = 1
    canonical_order: bool = True

    def validate(self) -> None:
        if self.max_passes < 1:
            raise ValueError("clustering.max_passes must be >= 1")
        if self.min_cluster_size < 1:
            raise ValueError("clustering.min_cluster_size must be >= 1")
        for name in ("org_dominance", "keyword_dominance"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"clustering.{name} must be within [0, 1]")


@dataclass
class AnalyticsConfig:
    cache_size: int = 32
    validate_input: bool = True

    def validate(self) -> None:
        if self.cache_size < 0:
            raise ValueError("analytics.cache_size must be non-negative")


@dataclass
class SourceConfig:
    adapter: str = "json"
    path: str = "data/network.json"

    def validate(self) -> None:
        pass


@dataclass
class Settings:
    influence: InfluenceConfig = field(default_factory=InfluenceConfig)
    centrality: CentralityConfig = field(default_factory=CentralityConfig)
    communities: CommunityConfig = field(default_factory=CommunityConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    source: SourceConfig = field(default_factory=SourceConfig)

    def validate(self) -> None:
        for f in fields(self):
            getattr(self, f.name).validate()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings from a YAML file with env var overlay.

    Without a path the built-in defaults are used; an explicit path that
    does not exist is an error.
    """
    yaml_config: dict[str, Any] = {}
    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_file) as f:
            yaml_config = yaml.safe_load(f) or {}
    return settings_from_dict(yaml_config)


def settings_from_dict(yaml_config: dict[str, Any]) -> Settings:
    settings = _apply_yaml(Settings(), yaml_config)
    settings = _apply_env_vars(settings)
    settings.validate()
    return settings


def _apply_yaml(settings: Settings, yaml_config: dict[str, Any]) -> Settings:
    """Apply YAML config values to settings, section by section."""
    for section in fields(settings):
        values = yaml_config.get(section.name)
        if not values:
            continue
        current = getattr(settings, section.name)
        known = {f.name for f in fields(current)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(
                f"Unknown keys in '{section.name}' section: {', '.join(sorted(unknown))}"
            )
        merged = {**asdict(current), **values}
        setattr(settings, section.name, type(current)(**merged))
    return settings


def _apply_env_vars(settings: Settings) -> Settings:
    """Apply environment variable overrides. Format: NETINSIGHT__SECTION__KEY."""
    prefix = "NETINSIGHT__"

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        parts = key[len(prefix):].lower().split("__")
        if len(parts) != 2:
            continue

        section, field_name = parts
        _set_field(settings, section, field_name, value)

    return settings


def _set_field(settings: Settings, section: str, field_name: str, value: str) -> None:
    """Set a field on the settings object from an env var value."""
    section_obj = getattr(settings, section, None)
    if section_obj is None or not hasattr(section_obj, field_name):
        return

    current_value = getattr(section_obj, field_name)

    # Type coercion based on current type
    if isinstance(current_value, bool):
        setattr(section_obj, field_name, value.lower() in ("true", "1", "yes"))
    elif isinstance(current_value, int):
        setattr(section_obj, field_name, int(value))
    elif isinstance(current_value, float):
        setattr(section_obj, field_name, float(value))
    else:
        setattr(section_obj, field_name, value)
