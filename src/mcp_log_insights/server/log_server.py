"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (analyze a log file, export slow requests)
- Resources: addressable data blobs (formats, bucket layout, schemas)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mcp_log_insights.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_insights.prompts.registry import register_prompts
from mcp_log_insights.resources.registry import register_resources
from mcp_log_insights.tools.analyze import analyze_log_impl, export_slow_requests_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    stdout carries the MCP transport, so logs go to stderr.
    """
    level_name = os.getenv("LOG_INSIGHTS_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("log-insights", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def analyze_log(
    log_path: str,
    log_format: str,
    min_response_ms: float | None = None,
    contains: str | None = None,
    sort_by: str = "response_time",
    descending: bool = True,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return performance insights for a log file.

    Parameters
    ----------
    log_path:
        Path to a local log file, read in chunks (any size).
    log_format:
        One of: mybatis_sql, nginx, tomcat, logback.
    min_response_ms:
        Only list slow requests at or above this response time (milliseconds).
        Aggregates are unaffected.
    contains:
        Case-insensitive substring filter on the slow request target.
    sort_by:
        Detail table sort key: response_time, raw_timestamp, target, method, seq.
    descending:
        Sort direction for the detail table.
    limit:
        Maximum number of slow requests returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        KPIs, top sources/targets, slowest targets, rate series, latency histogram
        and the filtered slow request rows.
    """
    return await analyze_log_impl(
        log_path=log_path,
        log_format=log_format,
        min_response_ms=min_response_ms,
        contains=contains,
        sort_by=sort_by,
        descending=descending,
        limit=limit,
    )


@mcp.tool()
async def export_slow_requests(
    log_path: str,
    log_format: str,
    output_dir: str | None = None,
    min_response_ms: float | None = None,
    contains: str | None = None,
) -> dict[str, Any]:
    """Write the slow request table of a log file to CSV.

    The file is named slow_requests_<format>_<date>.csv and written to
    ``output_dir`` (default: next to the log file).

    Returns
    -------
    dict:
        {"path": str, "rows": int}
    """
    return await export_slow_requests_impl(
        log_path=log_path,
        log_format=log_format,
        output_dir=output_dir,
        min_response_ms=min_response_ms,
        contains=contains,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
