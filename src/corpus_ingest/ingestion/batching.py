"""Upsert batching — keep each request under the vector index's limits."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from corpus_ingest.config import get_settings
from corpus_ingest.ingestion.models import UpsertBatch

if TYPE_CHECKING:
    from langchain_core.documents import Document


def make_batches(
    chunks: Sequence[Document],
    namespace: str,
    batch_size: int | None = None,
) -> list[UpsertBatch]:
    """Partition *chunks* into consecutive batches of at most *batch_size*.

    Returns ``ceil(len(chunks) / batch_size)`` batches; only the last one may
    be short.  Order is preserved, so concatenating the batches gives back
    *chunks* exactly.
    """
    if batch_size is None:
        batch_size = get_settings().upsert_batch_size
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return [
        UpsertBatch(namespace=namespace, index=i, chunks=list(chunks[start : start + batch_size]))
        for i, start in enumerate(range(0, len(chunks), batch_size))
    ]
