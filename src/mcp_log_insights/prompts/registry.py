"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.prompts.base import Message, UserMessage

from mcp_log_insights.core.models import LogFormat


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def review_log_performance(
        log_path: str,
        log_format: str = LogFormat.NGINX.value,
        min_response_ms: float | None = None,
        focus: str | None = None,
    ) -> list[Message]:
        """Build a prompt for a structured performance review of a log file."""
        fmt = LogFormat.parse(log_format)
        call_lines = [f"- log_path: {log_path}", f"- log_format: {fmt.value}"]
        if min_response_ms is not None:
            call_lines.append(f"- min_response_ms: {min_response_ms}")
        if focus:
            call_lines.append(f"- contains: {focus}")
        call_block = "\n".join(call_lines)
        return [
            UserMessage(
                "You are a senior performance engineer for backend services. "
                "Provide concise, evidence-based findings from aggregate log statistics. "
                "Do not invent numbers; quote them from tool output."
            ),
            UserMessage(
                "Review the log file using analyze_log. Follow this workflow:\n"
                "- Always call analyze_log first with the parameters below.\n"
                "- Compare peak_rate with the rate series to locate traffic spikes.\n"
                "- Use the histogram to find 5-minute windows dominated by the "
                "1-5s, 5-10s or >10s buckets.\n"
                "- Cross-check slowest_targets against top_targets: a slow target "
                "that is also hot matters most.\n"
                "- If total_records is 0, say the format is probably wrong and suggest "
                "another log_format.\n"
                "- Bucket layout is available at app://log-insights/latency-buckets.\n\n"
                "Call analyze_log with:\n"
                f"{call_block}\n\n"
                "Return this structure:\n"
                "1) Headline KPIs (requests, error rate, mean response time, peak rate)\n"
                "2) Hotspots (up to 5 targets with count and mean latency)\n"
                "3) Worst windows (up to 3 histogram rows)\n"
                "4) Worst requests (up to 5 slow request rows with timestamp and ms)\n"
                "5) Next actions (2-4 bullets)\n"
            ),
        ]
