"""Text chunking strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_text_splitters import RecursiveCharacterTextSplitter

from corpus_ingest.config import get_settings

if TYPE_CHECKING:
    from langchain_core.documents import Document


def chunk_documents(
    documents: list[Document],
    chunk_size: int | None = None,
    chunk_overlap: int | None = None,
) -> list[Document]:
    """Split *documents* into smaller chunks for embedding.

    Parameters
    ----------
    documents:
        Source documents produced by a loader.
    chunk_size:
        Maximum number of characters per chunk; defaults to settings.
    chunk_overlap:
        Overlapping characters between consecutive chunks; defaults to
        settings.

    Returns
    -------
    list[Document]
        Chunked documents ready for embedding.  Each inherits its parent's
        metadata plus ``start_index``, the character offset of the chunk in
        the parent text.
    """
    if chunk_size is None:
        chunk_size = get_settings().chunk_size
    if chunk_overlap is None:
        chunk_overlap = get_settings().chunk_overlap
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=["\n\n", "\n", ". ", " ", ""],
        add_start_index=True,
    )
    return splitter.split_documents(documents)
