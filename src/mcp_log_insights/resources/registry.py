"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_insights.core.log_service import analyze_file
from mcp_log_insights.core.models import LATENCY_BOUNDS_MS, LATENCY_BUCKETS, LogFormat
from mcp_log_insights.core.report import Summary

ALLOWED_FILE_SUFFIXES = {".log", ".txt"}
BASE_DIR_ENV = "LOG_INSIGHTS_BASE_DIR"

SAMPLE_LINES: dict[LogFormat, tuple[str, ...]] = {
    LogFormat.MYBATIS_SQL: (
        "[2024-03-01 12:07:33.120] [INFO] [SQL_END] [com.acme.order.OrderMapper.selectById] [250ms]",
        "[2024-03-01 12:08:01.004] [INFO] [SQL_END] [com.acme.user.UserMapper.findAll] [1840ms]",
    ),
    LogFormat.NGINX: (
        '10.0.0.1 - - [01/Mar/2024:12:07:33 +0000] "GET /api/orders?id=7 HTTP/1.1" 200 512 0.052',
        '10.0.0.2 - - [01/Mar/2024:12:08:10 +0000] "POST /api/login HTTP/1.1" 500 - 1.730',
    ),
    LogFormat.TOMCAT: (
        '10.0.0.1 - - [01/Mar/2024:12:07:33 +0000] "GET /shop/cart HTTP/1.1" 200 1024 850',
        '10.0.0.3 - - [01/Mar/2024:12:09:45 +0000] "GET /shop/item HTTP/1.1" 404 0 12',
    ),
    LogFormat.LOGBACK: (
        '10.0.0.4 - - [01/Mar/2024:12:07:33 +0000] "GET /health HTTP/1.1" 200 2 3',
        '10.0.0.4 - - [01/Mar/2024:12:11:02 +0000] "PUT /api/profile HTTP/1.1" 200 88 2300',
    ),
}


def _base_dir() -> Path:
    """Return the resolved base directory for file resources."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _resolve_log_path(path: str) -> Path:
    """Resolve and validate a log file path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    if resolved.suffix.lower() not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed}.")
    return resolved


def latency_bucket_table() -> list[dict[str, Any]]:
    """Describe the latency buckets as half-open millisecond ranges."""
    lows = (0, *LATENCY_BOUNDS_MS)
    highs = (*LATENCY_BOUNDS_MS, None)
    return [
        {"label": label, "min_ms": lo, "max_ms": hi}
        for label, lo, hi in zip(LATENCY_BUCKETS, lows, highs)
    ]


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://log-insights/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        base = _base_dir()
        return (
            "Resources:\n"
            "- app://log-insights/help\n"
            "- app://log-insights/formats\n"
            "- app://log-insights/latency-buckets\n"
            "- app://log-insights/schemas/summary\n"
            "- app://log-insights/examples/{log_format}\n"
            f"- summary://{{log_format}}/{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed})\n"
            f"\nBase directory: {base}\n"
        )

    @mcp.resource("app://log-insights/formats")
    def formats() -> list[str]:
        """Return the supported log format names."""
        return [f.value for f in LogFormat]

    @mcp.resource("app://log-insights/latency-buckets")
    def latency_buckets() -> list[dict[str, Any]]:
        """Return the latency histogram bucket layout."""
        return latency_bucket_table()

    @mcp.resource("app://log-insights/schemas/summary")
    def summary_schema() -> dict[str, Any]:
        """Return the JSON schema for analysis summaries."""
        return Summary.model_json_schema(mode="serialization")

    @mcp.resource("app://log-insights/examples/{log_format}")
    def sample_log(log_format: str) -> str:
        """Return a few sample lines for a format."""
        return "\n".join(SAMPLE_LINES[LogFormat.parse(log_format)]) + "\n"

    @mcp.resource("summary://{log_format}/{path}")
    async def summary_resource(log_format: str, path: str) -> dict[str, Any]:
        """Analyze a log file within LOG_INSIGHTS_BASE_DIR and return its summary."""
        p = _resolve_log_path(path)
        summary = await analyze_file(p, log_format)
        return summary.model_dump(mode="json")
