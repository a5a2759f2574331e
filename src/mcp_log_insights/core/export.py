"""CSV export and re-import of the slow-request table."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .models import LogFormat
from .report import SlowRequestRow

BOM = "\ufeff"
HEADER = ("No", "Timestamp", "Method", "Target", "ResponseTime(ms)")


@dataclass(frozen=True, slots=True)
class ExportRow:
    no: int
    timestamp: str
    method: str
    target: str
    response_time_ms: float


def export_filename(fmt: LogFormat | str, today: date | None = None) -> str:
    """File name embedding the format and the current date."""
    fmt = LogFormat.parse(fmt)
    today = today or date.today()
    return f"slow_requests_{fmt.value}_{today.isoformat()}.csv"


def render_csv(rows: Iterable[SlowRequestRow]) -> str:
    """Render rows, in the given order, as BOM-prefixed CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for i, r in enumerate(rows, start=1):
        writer.writerow([i, r.raw_timestamp, r.method, r.target, f"{r.response_time_ms:.2f}"])
    return BOM + buf.getvalue()


def write_csv(path: str | Path, rows: Iterable[SlowRequestRow]) -> int:
    """Write rows to ``path`` as UTF-8; return the number of data rows."""
    rows = list(rows)
    Path(path).write_text(render_csv(rows), encoding="utf-8", newline="")
    return len(rows)


def parse_csv(text: str) -> list[ExportRow]:
    """Parse CSV produced by render_csv back into rows."""
    if text.startswith(BOM):
        text = text[len(BOM) :]
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None or tuple(header) != HEADER:
        raise ValueError(f"Unexpected CSV header: {header!r}")

    out: list[ExportRow] = []
    for line_no, row in enumerate(reader, start=2):
        if not row:
            continue
        try:
            no, ts, method, target, ms = row
            out.append(
                ExportRow(
                    no=int(no),
                    timestamp=ts,
                    method=method,
                    target=target,
                    response_time_ms=float(ms),
                )
            )
        except ValueError as exc:
            raise ValueError(f"Malformed CSV row at line {line_no}: {row!r}") from exc
    return out
