"""Domain models for fingerprints, upsert batches and ingestion results."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from langchain_core.documents import Document
from pydantic import BaseModel, Field


class Fingerprint(BaseModel):
    """Content digest of one directory's eligible files.

    Attributes
    ----------
    directory_id:
        Base name of the directory; also the key in the fingerprint store.
    hash:
        SHA-256 hex digest over the sorted ``(relative path, file digest)``
        pairs.  ``""`` marks the "no history" sentinel.
    children:
        Per-file digests keyed by POSIX path relative to the directory.
    computed_at:
        UTC timestamp of when the digest was computed.
    """

    directory_id: str
    hash: str = ""
    children: dict[str, str] = Field(default_factory=dict)
    computed_at: datetime | None = None

    @classmethod
    def empty(cls, directory_id: str) -> Fingerprint:
        return cls(directory_id=directory_id)

    @property
    def is_empty(self) -> bool:
        return self.hash == ""


class ChangeDecision(BaseModel):
    """Outcome of comparing a directory's current and stored fingerprints."""

    directory_id: str
    changed: bool
    current: Fingerprint
    previous: Fingerprint


class UpsertBatch(BaseModel):
    """An ordered slice of one file's chunks bound for a single namespace."""

    namespace: str
    index: int
    chunks: list[Document]

    model_config = {"arbitrary_types_allowed": True}

    def __len__(self) -> int:
        return len(self.chunks)


class DirectoryState(str, Enum):
    PENDING = "pending"
    CHECKING = "checking"
    SKIPPED = "skipped"
    PROCESSING = "processing"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially_failed"


class FileResult(BaseModel):
    """Per-file outcome of the load → split → upsert pipeline."""

    path: str
    namespace: str
    ok: bool = False
    chunks: int = 0
    batches_upserted: int = 0
    error: str | None = None


class DirectoryResult(BaseModel):
    """Final state of one directory after a pass."""

    directory_id: str
    path: str
    state: DirectoryState = DirectoryState.PENDING
    reason: str = ""
    files: list[FileResult] = Field(default_factory=list)
    fingerprint_written: bool = False

    @property
    def failed_files(self) -> list[FileResult]:
        return [f for f in self.files if not f.ok]


class RunReport(BaseModel):
    """Aggregate of every directory visited in one run."""

    root: str
    directories: list[DirectoryResult] = Field(default_factory=list)

    def by_state(self, state: DirectoryState) -> list[DirectoryResult]:
        return [d for d in self.directories if d.state == state]

    @property
    def has_failures(self) -> bool:
        return any(d.state == DirectoryState.PARTIALLY_FAILED for d in self.directories)

    def summary(self) -> str:
        counts = {state: len(self.by_state(state)) for state in DirectoryState}
        msg = (
            f"{len(self.directories)} directories: "
            f"{counts[DirectoryState.COMPLETED]} completed, "
            f"{counts[DirectoryState.SKIPPED]} skipped, "
            f"{counts[DirectoryState.PARTIALLY_FAILED]} partially failed"
        )
        # Only dry runs leave directories in PROCESSING.
        if counts[DirectoryState.PROCESSING]:
            msg += f", {counts[DirectoryState.PROCESSING]} changed (not ingested)"
        return msg
