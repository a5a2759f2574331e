"""Bounded top-K selection of the slowest requests."""

from __future__ import annotations

import heapq
from dataclasses import dataclass

from .models import Record

DEFAULT_CAPACITY = 1000


@dataclass(frozen=True, slots=True)
class SlowRequest:
    """A retained request plus its 1-based arrival ordinal within the run."""

    seq: int
    record: Record

    @property
    def response_time(self) -> float:
        # Only timed records ever reach the selector.
        return self.record.response_time_seconds or 0.0


class SlowRequestSelector:
    """Keep the ``capacity`` records with the largest response time seen so far.

    Backed by a min-heap keyed by ``(response_time, -seq)``: the root is the
    smallest survivor and, among equal values, the latest one, so a later equal
    value never displaces an earlier one.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._heap: list[tuple[float, int, SlowRequest]] = []

    def __len__(self) -> int:
        return len(self._heap)

    @property
    def minimum(self) -> float | None:
        """Smallest retained response time, or None while empty."""
        return self._heap[0][0] if self._heap else None

    def consider(self, seq: int, record: Record) -> bool:
        """Offer a timed record; return True when it was admitted."""
        rt = record.response_time_seconds
        if rt is None:
            return False

        item = (rt, -seq, SlowRequest(seq=seq, record=record))
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, item)
            return True
        if rt > self._heap[0][0]:
            heapq.heapreplace(self._heap, item)
            return True
        return False

    def finalize(self) -> list[SlowRequest]:
        """Survivors sorted by response time descending, ties by arrival."""
        return [item[2] for item in sorted(self._heap, key=lambda item: (-item[0], -item[1]))]
