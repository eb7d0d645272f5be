"""
Memory System Configuration - Limits and tuning for retention and retrieval.

Loaded from YAML with an optional named preset as the base layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError


@dataclass(frozen=True)
class MemorySystemConfig:
    """Immutable configuration for a MemorySystem."""

    max_events_in_memory: int = 10_000
    max_thoughts_in_memory: int = 20_000
    thought_similarity_threshold: float = 0.85
    forgetting_curve_decay: float = 0.1
    consolidation_enabled: bool = True
    maintenance_interval: timedelta = field(default_factory=lambda: timedelta(hours=24))  # advisory only
    semantic_search_enabled: bool = False  # reserved for a vector scorer

    def __post_init__(self) -> None:
        if self.max_events_in_memory <= 0:
            raise ConfigurationError(
                f"max_events_in_memory must be positive, got {self.max_events_in_memory}"
            )
        if self.max_thoughts_in_memory <= 0:
            raise ConfigurationError(
                f"max_thoughts_in_memory must be positive, got {self.max_thoughts_in_memory}"
            )
        if not 0.0 <= self.thought_similarity_threshold <= 1.0:
            raise ConfigurationError(
                "thought_similarity_threshold must be between 0.0 and 1.0, "
                f"got {self.thought_similarity_threshold}"
            )
        if self.forgetting_curve_decay < 0.0:
            raise ConfigurationError(
                f"forgetting_curve_decay must not be negative, got {self.forgetting_curve_decay}"
            )
        if self.maintenance_interval <= timedelta(0):
            raise ConfigurationError("maintenance_interval must be positive")

    @classmethod
    def preset(cls, name: str) -> MemorySystemConfig:
        """Return a named preset: default, development, production or lightweight."""
        try:
            return PRESETS[name.strip().lower()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown preset {name!r}; expected one of {sorted(PRESETS)}"
            ) from None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MemorySystemConfig:
        """
        Create config from a dictionary.

        A ``preset`` key selects the base values; every other known key
        overrides it. The interval is given as ``maintenance_interval_seconds``.
        """
        if not data:
            return cls()

        data = dict(data)
        base = cls.preset(data.pop("preset")) if "preset" in data else cls()

        overrides: dict[str, Any] = {}
        if "maintenance_interval_seconds" in data:
            seconds = data.pop("maintenance_interval_seconds")
            try:
                overrides["maintenance_interval"] = timedelta(seconds=float(seconds))
            except (TypeError, ValueError, OverflowError) as e:
                raise ConfigurationError(
                    f"maintenance_interval_seconds must be a number, got {seconds!r}"
                ) from e
        for key in (
            "max_events_in_memory",
            "max_thoughts_in_memory",
            "thought_similarity_threshold",
            "forgetting_curve_decay",
            "consolidation_enabled",
            "semantic_search_enabled",
        ):
            if key in data:
                overrides[key] = data.pop(key)

        if data:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(data)}")

        try:
            return replace(base, **overrides)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "max_events_in_memory": self.max_events_in_memory,
            "max_thoughts_in_memory": self.max_thoughts_in_memory,
            "thought_similarity_threshold": self.thought_similarity_threshold,
            "forgetting_curve_decay": self.forgetting_curve_decay,
            "consolidation_enabled": self.consolidation_enabled,
            "maintenance_interval_seconds": self.maintenance_interval.total_seconds(),
            "semantic_search_enabled": self.semantic_search_enabled,
        }


PRESETS: dict[str, MemorySystemConfig] = {
    "default": MemorySystemConfig(),
    "development": MemorySystemConfig(
        max_events_in_memory=1_000,
        max_thoughts_in_memory=2_000,
        thought_similarity_threshold=0.8,
        forgetting_curve_decay=0.05,
        consolidation_enabled=True,
        maintenance_interval=timedelta(hours=12),
        semantic_search_enabled=False,
    ),
    "production": MemorySystemConfig(
        max_events_in_memory=50_000,
        max_thoughts_in_memory=100_000,
        thought_similarity_threshold=0.85,
        forgetting_curve_decay=0.1,
        consolidation_enabled=True,
        maintenance_interval=timedelta(hours=24),
        semantic_search_enabled=True,
    ),
    "lightweight": MemorySystemConfig(
        max_events_in_memory=100,
        max_thoughts_in_memory=200,
        thought_similarity_threshold=0.9,
        forgetting_curve_decay=0.2,
        consolidation_enabled=False,
        maintenance_interval=timedelta(hours=6),
        semantic_search_enabled=False,
    ),
}


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return dict(data)


def load_config(path: Path | str | None = None) -> MemorySystemConfig:
    """
    Load configuration from a YAML file.

    Returns the default configuration when ``path`` is None.
    The file may hold the options at top level or under a ``memory`` key.
    """
    if path is None:
        return MemorySystemConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    data = _load_yaml(path)
    if isinstance(data.get("memory"), dict):
        data = data["memory"]
    return MemorySystemConfig.from_dict(data)
