"""Document loaders — thin wrappers around LangChain document loaders."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import PyPDFLoader

if TYPE_CHECKING:
    from langchain_core.documents import Document


def load_pdf(path: str | Path) -> list[Document]:
    """Load a single PDF file, one ``Document`` per page.

    Each document carries ``source`` (the file path) and ``page`` metadata.
    Errors from the parser propagate unchanged; the ingestion driver turns
    them into :class:`~corpus_ingest.errors.LoadError`.
    """
    return PyPDFLoader(str(path)).load()
