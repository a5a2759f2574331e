"""MyBatis SQL trace parser."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import SQL_METHOD, SQL_SOURCE, SQL_STATUS, UNKNOWN_TIMESTAMP, Record


@dataclass(frozen=True, slots=True)
class MybatisSqlParser:
    """Parse '... [SQL_END] [com.acme.UserMapper.select] [250ms]' completion lines."""

    _end_re = re.compile(r"\[SQL_END\]\s+\[(?P<stmt>.*?)\]\s+\[(?P<ms>\d+)ms\]")
    _ts_re = re.compile(r"\[(?P<ts>\d{4}-\d{2}-\d{2}\s\d{2}:\d{2}:\d{2})")

    def parse(self, line: str) -> Record | None:
        """Parse a SQL completion line into a Record."""
        m = self._end_re.search(line)
        if not m:
            return None

        ts = self._ts_re.search(line)
        return Record(
            source=SQL_SOURCE,
            raw_timestamp=ts.group("ts") if ts else UNKNOWN_TIMESTAMP,
            method=SQL_METHOD,
            target=m.group("stmt").rsplit(".", 1)[-1],
            status_code=SQL_STATUS,
            response_time_seconds=int(m.group("ms")) / 1000,
        )
