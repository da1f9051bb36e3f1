"""Abstract base class for vector-index backends.

Adding a new backend (Pinecone, Weaviate, Qdrant …) only requires
subclassing :class:`VectorIndexBase` and implementing :meth:`upsert` and
:meth:`health_check`.  The ingestion driver is backend-agnostic.

Backends must give upserts overwrite semantics: writing the same chunk
identity twice replaces the first write.  A file whose upsert fails half
way is retried by re-ingesting the whole file on a later run, so already
written batches are simply overwritten.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from langchain_core.documents import Document


def chunk_id(namespace: str, chunk: Document) -> str:
    """Deterministic id for *chunk*: same file and position, same id.

    Only the base name of ``metadata["source"]`` is used, so the id does not
    depend on how the corpus root was spelled.  Files are listed directly
    inside their directory, so base names are unique within a namespace.
    """
    source = PurePath(chunk.metadata.get("source", "")).name
    index = chunk.metadata.get("chunk_index", "")
    return hashlib.sha256(f"{namespace}\0{source}\0{index}".encode()).hexdigest()[:32]


class VectorIndexBase(ABC):
    """Backend-agnostic, namespaced vector-index interface."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def upsert(self, chunks: list[Document], namespace: str) -> int:
        """Embed *chunks* and write them under *namespace*.

        Returns the number of vectors written.  Any failure is raised; the
        caller decides how far it propagates.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
