"""Configuration helpers for the link analysis engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def category_threshold(self, category: str) -> int:
        thresholds = self.raw.get("score_categories", {})
        return int(thresholds.get(category, 0))


DEFAULTS: Dict[str, Any] = {
    "max_results": 20,
    "points_per_occurrence": 20,
    "max_points_per_keyword": 50,
    "max_score": 100,
    "explanation_keywords": 3,
    "min_chunk_length": 21,
    "strong_semantic_threshold": 0.6,
    "score_categories": {
        "high": 75,
        "medium": 45,
    },
    "embedding_model": "sentence-transformers/all-MiniLM-L6-v2",
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
