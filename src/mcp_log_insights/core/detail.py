"""Post-hoc filtering and sorting of the slow-request table."""

from __future__ import annotations

from collections.abc import Iterable

from .report import SlowRequestRow

SORT_KEYS = {
    "response_time": lambda r: r.response_time_seconds,
    "raw_timestamp": lambda r: r.raw_timestamp,
    "target": lambda r: r.target,
    "method": lambda r: r.method,
    "seq": lambda r: r.seq,
}


def select_slow_requests(
    rows: Iterable[SlowRequestRow],
    *,
    min_response_ms: float | None = None,
    contains: str | None = None,
    sort_by: str = "response_time",
    descending: bool = True,
    limit: int | None = None,
) -> list[SlowRequestRow]:
    """Filter the finalized detail rows by threshold/target substring, then sort."""
    key = SORT_KEYS.get(sort_by)
    if key is None:
        valid = ", ".join(SORT_KEYS)
        raise ValueError(f"Unknown sort key '{sort_by}'. Valid values: {valid}.")
    if limit is not None and limit < 0:
        raise ValueError("limit must be >= 0")

    needle = contains.lower() if contains else None
    out = [
        r
        for r in rows
        if (min_response_ms is None or r.response_time_ms >= min_response_ms)
        and (needle is None or needle in r.target.lower())
    ]
    out.sort(key=key, reverse=descending)
    return out if limit is None else out[:limit]
