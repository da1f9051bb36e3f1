"""
Vector store — namespaced upsert target for embedded chunks.

Public surface
--------------
- :class:`VectorIndexBase` — abstract backend (subclass for Pinecone, etc.).
- :class:`ChromaVectorIndex` — default Chroma backend.
- :func:`chunk_id` — deterministic chunk identity used for overwrite upserts.
"""

from corpus_ingest.vectorstore.base import VectorIndexBase, chunk_id

__all__ = [
    "ChromaVectorIndex",
    "VectorIndexBase",
    "chunk_id",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorIndex to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorIndex":
        from corpus_ingest.vectorstore.chroma_store import ChromaVectorIndex

        return ChromaVectorIndex
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
