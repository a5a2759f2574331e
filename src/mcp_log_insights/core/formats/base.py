"""Parser interface."""

from __future__ import annotations

from typing import Protocol

from ..models import Record


class LineParser(Protocol):
    """Parser interface: return a Record if the line matches, else None."""

    def parse(self, line: str) -> Record | None:
        """Parse a log line into a Record if recognized."""
        ...
