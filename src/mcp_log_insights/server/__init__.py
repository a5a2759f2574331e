"""MCP server wiring."""
