"""Streaming performance insights for server and database log files."""
