"""Embedding model factory."""

from __future__ import annotations

from langchain_huggingface import HuggingFaceEmbeddings

from corpus_ingest.config import get_settings


def get_embedding_function(model_name: str | None = None) -> HuggingFaceEmbeddings:
    """Return the configured sentence-transformer embedding function."""
    return HuggingFaceEmbeddings(model_name=model_name or get_settings().embedding_model)
