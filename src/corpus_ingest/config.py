"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Corpus layout
    docs_root: str = Field(default="docs", description="Root directory with one subdirectory per topic")
    history_dir: str = Field(default="history", description="Where per-directory fingerprints are kept")
    file_extension: str = Field(default=".pdf", description="Only files with this extension are ingested")
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [".*", "node_modules", "test_coverage"],
        description="Glob patterns for entry names left out of scanning and fingerprinting",
    )

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 200

    # Upsert
    upsert_batch_size: int = Field(
        default=50,
        description="Max chunks per upsert request; keeps well under the index's per-request limits",
    )

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    collection_prefix: str = "corpus"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("file_extension")
    @classmethod
    def _leading_dot(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("file_extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("upsert_batch_size")
    @classmethod
    def _positive_batch(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"upsert_batch_size must be >= 1, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @model_validator(mode="after")
    def _overlap_below_size(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, built and validated on first use."""
    return Settings()
