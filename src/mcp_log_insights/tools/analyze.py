"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp_log_insights.core.detail import select_slow_requests
from mcp_log_insights.core.export import export_filename, write_csv
from mcp_log_insights.core.log_service import analyze_file
from mcp_log_insights.core.models import LogFormat

DEFAULT_LIMIT = 100
HARD_LIMIT = 1000


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return min(limit, HARD_LIMIT)


async def analyze_log_impl(
    *,
    log_path: str,
    log_format: str,
    min_response_ms: float | None = None,
    contains: str | None = None,
    sort_by: str = "response_time",
    descending: bool = True,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `analyze_log` MCP tool.

    Notes
    -----
    - The selector always keeps the global top-K slowest requests; the
      threshold and substring filters only narrow the returned detail rows.
    - ``slow_request_count`` is the number of rows after filtering, before
      ``limit`` is applied.
    """
    fmt = LogFormat.parse(log_format)
    limit_eff = _resolve_limit(limit)
    if min_response_ms is not None and min_response_ms < 0:
        raise ValueError("min_response_ms must be >= 0")

    summary = await analyze_file(log_path, fmt)
    rows = select_slow_requests(
        summary.slow_requests,
        min_response_ms=min_response_ms,
        contains=contains,
        sort_by=sort_by,
        descending=descending,
    )

    out = summary.model_dump(mode="json")
    out["slow_request_count"] = len(rows)
    out["slow_requests"] = [r.model_dump(mode="json") for r in rows[:limit_eff]]
    return out


async def export_slow_requests_impl(
    *,
    log_path: str,
    log_format: str,
    output_dir: str | None = None,
    min_response_ms: float | None = None,
    contains: str | None = None,
) -> dict[str, Any]:
    """Implementation for the `export_slow_requests` MCP tool."""
    fmt = LogFormat.parse(log_format)
    out_dir = Path(output_dir) if output_dir else Path(log_path).resolve().parent
    if not out_dir.is_dir():
        raise FileNotFoundError(f"Output directory not found: {out_dir}")

    summary = await analyze_file(log_path, fmt)
    rows = select_slow_requests(
        summary.slow_requests,
        min_response_ms=min_response_ms,
        contains=contains,
    )
    target = out_dir / export_filename(fmt)
    count = write_csv(target, rows)
    return {"path": str(target), "rows": count}
