"""Ingestion and aggregation engine."""
