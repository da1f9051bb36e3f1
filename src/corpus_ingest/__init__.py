"""Incremental ingestion of a per-topic document corpus into a vector index."""

__version__ = "0.1.0"
