"""Access log parser (nginx, tomcat, logback access layouts)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import Record

# Values above this are taken to be milliseconds for tomcat/logback.
MS_HEURISTIC_CUTOFF = 100.0


@dataclass(frozen=True, slots=True)
class AccessLogParser:
    """Parse Common/Combined access lines with an optional trailing response time.

    ``millis_heuristic`` enables the tomcat/logback rule: a trailing value
    greater than 100 is in milliseconds and is divided by 1000.
    """

    millis_heuristic: bool = False

    _re = re.compile(
        r"^(?P<ip>\S+)(?:\s+\S+\s+\S+)?\s+\[(?P<ts>.*?)\]\s+"
        r'"(?P<method>\S+)\s+(?P<path>\S+).*?"\s+'
        r"(?P<status>\d+)\s+"
        r"(?P<size>\d+|-)"
        r"(?:\s+(?P<rt>\d+\.?\d*))?"
    )

    def _response_time(self, raw: str | None) -> float | None:
        if raw is None:
            return None
        value = float(raw)
        if self.millis_heuristic and value > MS_HEURISTIC_CUTOFF:
            return value / 1000
        return value

    def parse(self, line: str) -> Record | None:
        """Parse an access-log line into a Record."""
        m = self._re.match(line)
        if not m:
            return None

        return Record(
            source=m.group("ip"),
            raw_timestamp=m.group("ts"),
            method=m.group("method"),
            target=m.group("path").split("?", 1)[0],
            status_code=int(m.group("status")),
            response_time_seconds=self._response_time(m.group("rt")),
        )
