"""Log line parsers, one per supported format."""

from __future__ import annotations

from ..models import LogFormat, Record
from .access import AccessLogParser
from .base import LineParser
from .mybatis import MybatisSqlParser

_PARSERS: dict[LogFormat, LineParser] = {
    LogFormat.MYBATIS_SQL: MybatisSqlParser(),
    LogFormat.NGINX: AccessLogParser(),
    LogFormat.TOMCAT: AccessLogParser(millis_heuristic=True),
    LogFormat.LOGBACK: AccessLogParser(millis_heuristic=True),
}


def parser_for(fmt: LogFormat) -> LineParser:
    """Return the parser registered for a format."""
    return _PARSERS[fmt]


def parse_line(line: str, fmt: LogFormat) -> Record | None:
    """Parse one line with the format's grammar; None when it does not match."""
    return _PARSERS[fmt].parse(line)


__all__ = [
    "AccessLogParser",
    "LineParser",
    "MybatisSqlParser",
    "parse_line",
    "parser_for",
]
