"""Single-pass running statistics over parsed records."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from .config import AnalysisConfig
from .models import (
    LATENCY_BUCKETS,
    SQL_SOURCE,
    UNKNOWN_TIMESTAMP,
    LogFormat,
    Record,
    latency_bucket_index,
)
from .selector import SlowRequestSelector


@dataclass(slots=True)
class TimingTotals:
    total: float = 0.0
    count: int = 0

    def add(self, seconds: float) -> None:
        self.total += seconds
        self.count += 1

    @property
    def mean(self) -> float | None:
        return self.total / self.count if self.count else None


@dataclass(slots=True)
class AnalysisState:
    """Mutable aggregation state owned by exactly one analysis run."""

    fmt: LogFormat
    selector: SlowRequestSelector
    source_counts: Counter[str] = field(default_factory=Counter)
    target_counts: Counter[str] = field(default_factory=Counter)
    rate_counts: Counter[str] = field(default_factory=Counter)
    target_timing: dict[str, TimingTotals] = field(default_factory=dict)
    histogram: dict[str, list[int]] = field(default_factory=dict)
    timing: TimingTotals = field(default_factory=TimingTotals)
    total_records: int = 0
    error_count: int = 0
    dropped_lines: int = 0

    @classmethod
    def create(cls, fmt: LogFormat, config: AnalysisConfig | None = None) -> AnalysisState:
        cfg = config or AnalysisConfig()
        return cls(fmt=fmt, selector=SlowRequestSelector(cfg.slow_capacity))


def rate_key(raw_timestamp: str, fmt: LogFormat) -> str:
    """Rate-series key: the whole timestamp for SQL, its date-time token otherwise."""
    if fmt is LogFormat.MYBATIS_SQL:
        return raw_timestamp
    return raw_timestamp.split(" ", 1)[0]


def five_minute_key(raw_timestamp: str, fmt: LogFormat) -> str:
    """Truncate a timestamp's minute to a multiple of 5, keeping date and hour.

    ``2024-03-01 12:07:33`` -> ``2024-03-01 12:05`` for SQL traces and
    ``10/Oct/2000:13:57:36 -0700`` -> ``10/Oct/2000 13:55`` for access logs.
    """
    try:
        if fmt is LogFormat.MYBATIS_SQL:
            date, time = raw_timestamp.split(" ")[:2]
            hour, minute = time.split(":")[:2]
        else:
            parts = raw_timestamp.split(":")
            date, hour, minute = parts[0], parts[1], parts[2]
        bucket = int(minute) // 5 * 5
    except (ValueError, IndexError):
        return UNKNOWN_TIMESTAMP
    return f"{date} {hour}:{bucket:02d}"


class Aggregator:
    """Apply one record's effects to an AnalysisState."""

    def update(self, state: AnalysisState, record: Record) -> None:
        state.total_records += 1
        fmt = state.fmt

        if record.source != SQL_SOURCE:
            state.source_counts[record.source] += 1
        state.target_counts[record.target] += 1
        state.rate_counts[rate_key(record.raw_timestamp, fmt)] += 1

        if record.status_code >= 400:
            state.error_count += 1

        rt = record.response_time_seconds
        if rt is None:
            return

        key = five_minute_key(record.raw_timestamp, fmt)
        row = state.histogram.get(key)
        if row is None:
            row = state.histogram[key] = [0] * len(LATENCY_BUCKETS)
        row[latency_bucket_index(rt)] += 1

        timing = state.target_timing.get(record.target)
        if timing is None:
            timing = state.target_timing[record.target] = TimingTotals()
        timing.add(rt)
        state.timing.add(rt)

        state.selector.consider(state.total_records, record)
