from __future__ import annotations

import pytest

from mcp_log_insights.server.log_server import mcp


@pytest.mark.asyncio
async def test_server_registers_tools_prompts_and_resources() -> None:
    tools = {t.name for t in await mcp.list_tools()}
    assert {"analyze_log", "export_slow_requests"} <= tools

    prompts = {p.name for p in await mcp.list_prompts()}
    assert "review_log_performance" in prompts

    resources = {str(r.uri) for r in await mcp.list_resources()}
    assert "app://log-insights/formats" in resources

    templates = {t.uriTemplate for t in await mcp.list_resource_templates()}
    assert "summary://{log_format}/{path}" in templates


@pytest.mark.asyncio
async def test_review_prompt_renders_call_parameters() -> None:
    result = await mcp.get_prompt(
        "review_log_performance",
        {"log_path": "/var/log/app.log", "log_format": "tomcat", "focus": "/shop"},
    )

    text = "\n".join(m.content.text for m in result.messages)
    assert "- log_format: tomcat" in text
    assert "- contains: /shop" in text
