from __future__ import annotations

import pytest

from mcp_log_insights.core.aggregator import (
    Aggregator,
    AnalysisState,
    five_minute_key,
    rate_key,
)
from mcp_log_insights.core.models import (
    LATENCY_BUCKETS,
    SQL_SOURCE,
    UNKNOWN_TIMESTAMP,
    LogFormat,
    Record,
    latency_bucket,
)


@pytest.mark.parametrize(
    ("ms", "label"),
    [
        (0.0, "<10ms"),
        (9.999, "<10ms"),
        (10, "10-100ms"),
        (99.9, "10-100ms"),
        (100, "100-500ms"),
        (500, "500-1000ms"),
        (1000, "1-5s"),
        (5000, "5-10s"),
        (9999, "5-10s"),
        (10000, ">10s"),
        (120000, ">10s"),
    ],
)
def test_latency_bucket_boundaries(ms: float, label: str) -> None:
    assert latency_bucket(ms / 1000) == label


def test_five_minute_key_sql() -> None:
    assert five_minute_key("2024-03-01 12:07:33", LogFormat.MYBATIS_SQL) == "2024-03-01 12:05"
    assert five_minute_key("2024-03-01 09:04:59", LogFormat.MYBATIS_SQL) == "2024-03-01 09:00"
    assert five_minute_key(UNKNOWN_TIMESTAMP, LogFormat.MYBATIS_SQL) == UNKNOWN_TIMESTAMP


def test_five_minute_key_access() -> None:
    assert five_minute_key("10/Oct/2000:13:57:36 -0700", LogFormat.NGINX) == "10/Oct/2000 13:55"
    assert five_minute_key("10/Oct/2000:13:03:00 -0700", LogFormat.TOMCAT) == "10/Oct/2000 13:00"
    assert five_minute_key("garbage", LogFormat.NGINX) == UNKNOWN_TIMESTAMP


def test_rate_key() -> None:
    assert rate_key("2024-03-01 12:07:33", LogFormat.MYBATIS_SQL) == "2024-03-01 12:07:33"
    assert rate_key("10/Oct/2000:13:57:36 -0700", LogFormat.NGINX) == "10/Oct/2000:13:57:36"


def _rec(target: str, rt: float | None, *, source: str = "10.0.0.1", status: int = 200) -> Record:
    return Record(
        source=source,
        raw_timestamp="01/Mar/2024:12:07:33 +0000",
        method="GET",
        target=target,
        status_code=status,
        response_time_seconds=rt,
    )


def test_update_counts_frequency_errors_and_timing() -> None:
    state = AnalysisState.create(LogFormat.NGINX)
    agg = Aggregator()

    agg.update(state, _rec("/a", 0.05))
    agg.update(state, _rec("/a", None, status=500))
    agg.update(state, _rec("/b", 2.0, source="10.0.0.2", status=404))

    assert state.total_records == 3
    assert state.error_count == 2
    assert state.source_counts == {"10.0.0.1": 2, "10.0.0.2": 1}
    assert state.target_counts == {"/a": 2, "/b": 1}
    assert state.rate_counts == {"01/Mar/2024:12:07:33": 3}
    assert state.timing.count == 2
    assert state.timing.total == pytest.approx(2.05)
    assert state.target_timing["/a"].count == 1
    assert len(state.selector) == 2

    row = state.histogram["01/Mar/2024 12:05"]
    assert len(row) == len(LATENCY_BUCKETS)
    assert row[LATENCY_BUCKETS.index("10-100ms")] == 1
    assert row[LATENCY_BUCKETS.index("1-5s")] == 1
    assert sum(row) == 2


def test_update_skips_sql_sentinel_source() -> None:
    state = AnalysisState.create(LogFormat.MYBATIS_SQL)
    record = Record(
        source=SQL_SOURCE,
        raw_timestamp="2024-03-01 12:07:33",
        method="SQL",
        target="selectById",
        status_code=200,
        response_time_seconds=0.25,
    )
    Aggregator().update(state, record)

    assert state.source_counts == {}
    assert state.rate_counts == {"2024-03-01 12:07:33": 1}
    assert state.histogram["2024-03-01 12:05"][LATENCY_BUCKETS.index("100-500ms")] == 1
