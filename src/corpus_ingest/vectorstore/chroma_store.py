"""Chroma implementation of the vector-index abstraction.

Chroma has no namespaces inside a collection, so each namespace gets its
own collection named ``<collection_prefix>-<namespace>``.
"""

from __future__ import annotations

import hashlib
import logging
import re
from typing import TYPE_CHECKING, Any

import chromadb

from corpus_ingest.config import get_settings
from corpus_ingest.vectorstore.base import VectorIndexBase, chunk_id

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

_MAX_COLLECTION_NAME = 63
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9._-]+")


def collection_name_for(prefix: str, namespace: str) -> str:
    """Map *namespace* to a valid Chroma collection name.

    Chroma names are 3-63 characters of ``[a-zA-Z0-9._-]``, start and end
    with an alphanumeric, and never contain ``..``.  When the namespace has
    to be rewritten a short digest of the original is appended so that two
    distinct namespaces never collapse onto one collection.
    """
    raw = f"{prefix}-{namespace}"
    name = _INVALID_CHARS.sub("-", raw)
    name = re.sub(r"\.{2,}", ".", name).strip("._-")
    if name != raw or len(name) > _MAX_COLLECTION_NAME or len(name) < 3:
        digest = hashlib.sha256(namespace.encode()).hexdigest()[:8]
        name = f"{name[: _MAX_COLLECTION_NAME - len(digest) - 1]}-{digest}".strip("._-")
    return name


def _flat_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    # Chroma metadata values must be flat str/int/float/bool
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class ChromaVectorIndex(VectorIndexBase):
    """Chroma-backed vector index.

    Connection and naming parameters left as ``None`` come from settings.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    collection_prefix:
        Prepended to each namespace to form the collection name.
    embedder:
        LangChain embeddings used for text → vector conversion.  Defaults to
        the configured HuggingFace model.
    distance_metric:
        Distance function for new collections (``cosine`` | ``l2`` | ``ip``).
    """

    def __init__(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        collection_prefix: str | None = None,
        embedder: Embeddings | None = None,
        distance_metric: str = "cosine",
    ) -> None:
        if host is None or port is None or collection_prefix is None:
            cfg = get_settings()
            host = cfg.chroma_host if host is None else host
            port = cfg.chroma_port if port is None else port
            collection_prefix = cfg.collection_prefix if collection_prefix is None else collection_prefix
        if embedder is None:
            from corpus_ingest.ingestion.embedder import get_embedding_function

            embedder = get_embedding_function()
        self._client = chromadb.HttpClient(host=host, port=port)
        self._embedder = embedder
        self.collection_prefix = collection_prefix
        self.distance_metric = distance_metric
        self._collections: dict[str, Any] = {}

    def collection(self, namespace: str) -> Any:
        """Return (creating on first use) the collection for *namespace*."""
        if namespace not in self._collections:
            name = collection_name_for(self.collection_prefix, namespace)
            logger.debug("Using collection %r for namespace %r", name, namespace)
            self._collections[namespace] = self._client.get_or_create_collection(
                name=name,
                metadata={"hnsw:space": self.distance_metric, "namespace": namespace},
            )
        return self._collections[namespace]

    # -- VectorIndexBase overrides --------------------------------------------

    def upsert(self, chunks: list[Document], namespace: str) -> int:
        if not chunks:
            return 0
        texts = [c.page_content for c in chunks]
        embeddings = self._embedder.embed_documents(texts)
        self.collection(namespace).upsert(
            ids=[chunk_id(namespace, c) for c in chunks],
            embeddings=embeddings,
            documents=texts,
            metadatas=[_flat_metadata(c.metadata) for c in chunks],
        )
        return len(chunks)

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
