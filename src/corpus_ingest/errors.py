"""Exception hierarchy for incremental ingestion.

Errors are contained at the smallest unit that still lets the run make
progress:

* fingerprint store errors never leave the store (see
  :class:`~corpus_ingest.history.base.FingerprintStore`);
* :class:`HashingError` skips one directory;
* :class:`FileIngestionError` subclasses abort one file, and withhold the
  directory's fingerprint;
* :class:`RootScanError` aborts the whole run.
"""

from __future__ import annotations

from pathlib import Path


class IngestionError(Exception):
    """Base class for every error raised by this package."""


class FingerprintReadError(IngestionError):
    """A stored fingerprint exists but cannot be read or parsed."""


class FingerprintWriteError(IngestionError):
    """A fingerprint could not be persisted."""


class HashingError(IngestionError):
    """The content fingerprint of a directory could not be computed."""


class RootScanError(IngestionError):
    """The corpus root cannot be enumerated."""


class FileIngestionError(IngestionError):
    """A single file failed somewhere in load → split → upsert."""

    stage = "ingest"

    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(f"{self.stage} failed for {path}: {message}")
        self.path = Path(path)


class LoadError(FileIngestionError):
    stage = "load"


class SplitError(FileIngestionError):
    stage = "split"


class UpsertError(FileIngestionError):
    stage = "upsert"

    def __init__(self, path: str | Path, message: str, *, batch_index: int) -> None:
        super().__init__(path, f"batch {batch_index}: {message}")
        self.batch_index = batch_index
