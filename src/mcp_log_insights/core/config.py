"""Analysis run configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

CHUNK_SIZE_ENV = "LOG_INSIGHTS_CHUNK_SIZE"
SLOW_CAPACITY_ENV = "LOG_INSIGHTS_SLOW_CAPACITY"


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    chunk_size: int = 4 * 1024 * 1024
    slow_capacity: int = 1000

    top_sources: int = 10
    top_targets: int = 10
    top_slow_targets: int = 20

    encoding: str = "utf-8-sig"
    decode_errors: str = "replace"

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if self.slow_capacity < 1:
            raise ValueError("slow_capacity must be >= 1")


def _env_int(name: str) -> int | None:
    env = os.getenv(name)
    if env is None or env == "":
        return None
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
    return value


def resolve_analysis_config(cfg: AnalysisConfig | None) -> AnalysisConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = AnalysisConfig()

    changes: dict[str, int] = {}
    chunk_size = _env_int(CHUNK_SIZE_ENV)
    if chunk_size is not None and chunk_size != cfg.chunk_size:
        changes["chunk_size"] = chunk_size
    slow_capacity = _env_int(SLOW_CAPACITY_ENV)
    if slow_capacity is not None and slow_capacity != cfg.slow_capacity:
        changes["slow_capacity"] = slow_capacity

    if not changes:
        return cfg
    return replace(cfg, **changes)
