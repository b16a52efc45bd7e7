"""Test runner for Elasticsearch ingest pipeline definitions."""

__version__ = "0.1.0"
