"""Finalize aggregation state into an immutable Summary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .aggregator import AnalysisState, TimingTotals
from .config import AnalysisConfig
from .models import LATENCY_BUCKETS, LogFormat
from .selector import SlowRequest


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SourceStat(_Frozen):
    name: str
    count: int


class TargetStat(_Frozen):
    name: str
    count: int = Field(description="Requests seen for this target.")
    total_time: float = Field(description="Summed response time in seconds.")
    timed_count: int = Field(description="Requests that carried a response time.")
    mean_time: float | None = Field(description="Mean seconds; null when no timed requests.")


class SlowTargetStat(_Frozen):
    name: str
    mean_time: float
    count: int
    total_time: float


class RatePoint(_Frozen):
    key: str
    label: str
    count: int


class HistogramRow(_Frozen):
    key: str
    counts: tuple[int, ...] = Field(exclude=True, description="Counts in LATENCY_BUCKETS order.")
    total: int

    @computed_field(description="Counts per latency bucket label.")
    @property
    def buckets(self) -> dict[str, int]:
        return dict(zip(LATENCY_BUCKETS, self.counts))


class SlowRequestRow(_Frozen):
    seq: int = Field(description="1-based ordinal among parsed records.")
    source: str
    raw_timestamp: str
    method: str
    target: str
    status_code: int
    response_time_seconds: float

    @property
    def response_time_ms(self) -> float:
        return self.response_time_seconds * 1000

    @classmethod
    def from_selected(cls, item: SlowRequest) -> SlowRequestRow:
        r = item.record
        return cls(
            seq=item.seq,
            source=r.source,
            raw_timestamp=r.raw_timestamp,
            method=r.method,
            target=r.target,
            status_code=r.status_code,
            response_time_seconds=item.response_time,
        )


class Summary(_Frozen):
    format: LogFormat
    total_records: int
    unique_sources: int
    unique_targets: int
    error_count: int
    error_rate: float = Field(description="Percentage of records with status >= 400.")
    timed_records: int
    mean_response_time: float | None = Field(
        description="Mean seconds over timed records; null when not applicable."
    )
    peak_rate: int
    top_sources: tuple[SourceStat, ...]
    top_targets: tuple[TargetStat, ...]
    slowest_targets: tuple[SlowTargetStat, ...]
    rate_series: tuple[RatePoint, ...]
    histogram: tuple[HistogramRow, ...]
    slow_requests: tuple[SlowRequestRow, ...]


def _target_stat(name: str, count: int, timing: TimingTotals | None) -> TargetStat:
    timing = timing or TimingTotals()
    return TargetStat(
        name=name,
        count=count,
        total_time=timing.total,
        timed_count=timing.count,
        mean_time=timing.mean,
    )


def _label(key: str) -> str:
    return key.split()[-1] if " " in key else key


def finalize(state: AnalysisState, config: AnalysisConfig | None = None) -> Summary:
    """Build the Summary for a finished run."""
    cfg = config or AnalysisConfig()

    top_sources = [
        SourceStat(name=name, count=count)
        for name, count in state.source_counts.most_common(cfg.top_sources)
    ]
    top_targets = [
        _target_stat(name, count, state.target_timing.get(name))
        for name, count in state.target_counts.most_common(cfg.top_targets)
    ]

    slowest = sorted(
        (
            SlowTargetStat(name=name, mean_time=t.total / t.count, count=t.count, total_time=t.total)
            for name, t in state.target_timing.items()
            if t.count
        ),
        key=lambda s: s.mean_time,
        reverse=True,
    )[: cfg.top_slow_targets]

    rate_series = [
        RatePoint(key=key, label=_label(key), count=count)
        for key, count in sorted(state.rate_counts.items())
    ]
    histogram = [
        HistogramRow(key=key, counts=tuple(row), total=sum(row))
        for key, row in sorted(state.histogram.items())
    ]

    total = state.total_records
    error_rate = round(state.error_count * 100 / total, 2) if total else 0.0

    return Summary(
        format=state.fmt,
        total_records=total,
        unique_sources=len(state.source_counts),
        unique_targets=len(state.target_counts),
        error_count=state.error_count,
        error_rate=error_rate,
        timed_records=state.timing.count,
        mean_response_time=state.timing.mean,
        peak_rate=max(state.rate_counts.values(), default=0),
        top_sources=top_sources,
        top_targets=top_targets,
        slowest_targets=slowest,
        rate_series=rate_series,
        histogram=histogram,
        slow_requests=tuple(SlowRequestRow.from_selected(s) for s in state.selector.finalize()),
    )
