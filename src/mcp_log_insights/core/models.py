"""Core data models for log analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SQL_SOURCE = "System"
SQL_METHOD = "SQL"
SQL_STATUS = 200
UNKNOWN_TIMESTAMP = "Unknown"


class LogFormat(str, Enum):
    """Supported log layouts. Selected once per analysis run."""

    MYBATIS_SQL = "mybatis_sql"
    NGINX = "nginx"
    TOMCAT = "tomcat"
    LOGBACK = "logback"

    @classmethod
    def parse(cls, value: str | LogFormat) -> LogFormat:
        """Resolve a user-supplied format name (case-insensitive)."""
        if isinstance(value, LogFormat):
            return value
        name = value.strip().lower()
        try:
            return cls(name)
        except ValueError as e:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown log format '{value}'. Valid values: {valid}.") from e


@dataclass(frozen=True, slots=True)
class Record:
    """One parsed log entry."""

    source: str
    raw_timestamp: str  # opaque, format-specific; never reparsed
    method: str
    target: str
    status_code: int
    response_time_seconds: float | None = None  # always seconds when present


# Upper bounds in milliseconds; the last bucket is unbounded.
LATENCY_BOUNDS_MS: tuple[float, ...] = (10, 100, 500, 1000, 5000, 10000)
LATENCY_BUCKETS: tuple[str, ...] = (
    "<10ms",
    "10-100ms",
    "100-500ms",
    "500-1000ms",
    "1-5s",
    "5-10s",
    ">10s",
)


def latency_bucket_index(seconds: float) -> int:
    """Index of the half-open latency bucket containing ``seconds``."""
    ms = seconds * 1000
    for i, bound in enumerate(LATENCY_BOUNDS_MS):
        if ms < bound:
            return i
    return len(LATENCY_BOUNDS_MS)


def latency_bucket(seconds: float) -> str:
    """Label of the latency bucket containing ``seconds``."""
    return LATENCY_BUCKETS[latency_bucket_index(seconds)]
