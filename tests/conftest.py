"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from langchain_core.documents import Document

from corpus_ingest.config import get_settings
from corpus_ingest.vectorstore.base import VectorIndexBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeVectorIndex(VectorIndexBase):
    """In-memory index that records every upsert call.

    ``fail_on`` names files (by base name of the chunk ``source``) whose
    upserts raise, to simulate an embedding / index outage for one file.
    """

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[str, list[Document]]] = []
        self.fail_on = fail_on or set()

    def upsert(self, chunks: list[Document], namespace: str) -> int:
        sources = {Path(c.metadata.get("source", "")).name for c in chunks}
        if sources & self.fail_on:
            raise RuntimeError(f"index unavailable for {sorted(sources & self.fail_on)}")
        self.calls.append((namespace, list(chunks)))
        return len(chunks)

    def health_check(self) -> bool:
        return True

    def upserted_sources(self, namespace: str | None = None) -> set[str]:
        return {
            Path(c.metadata["source"]).name
            for ns, chunks in self.calls
            if namespace is None or ns == namespace
            for c in chunks
        }


def text_loader(path: Path) -> list[Document]:
    """Loader stand-in: treats the file's bytes as UTF-8 text, one page."""
    return [Document(page_content=path.read_text(encoding="utf-8"), metadata={"source": str(path), "page": 0})]


def write_files(directory: Path, files: dict[str, str]) -> Path:
    """Create *files* (relative path → text) under *directory*."""
    for rel, content in files.items():
        target = directory / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return directory


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Rebuild settings per test so env changes are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture()
def docs_root(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    root.mkdir()
    return root


@pytest.fixture()
def history_dir(tmp_path: Path) -> Path:
    return tmp_path / "history"
