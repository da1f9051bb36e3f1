"""
History — persisted per-directory fingerprints.

Public surface
--------------
- :class:`FingerprintStore` — abstract backend with never-raising read/write.
- :class:`JsonFingerprintStore` — one JSON record per directory on disk.
"""

from corpus_ingest.history.base import FingerprintStore
from corpus_ingest.history.json_store import JsonFingerprintStore

__all__ = [
    "FingerprintStore",
    "JsonFingerprintStore",
]
