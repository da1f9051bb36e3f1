"""Incremental ingestion driver.

For every topic directory under the corpus root::

    pending → checking → skipped
                       → processing → completed          (fingerprint written)
                                    → partially_failed   (fingerprint withheld)

and for every eligible file in a directory being processed::

    load → split → batch → upsert (batch by batch, in order)

Directories, files and batches are handled strictly one after another.
A directory's fingerprint only advances once every file of the pass has
been upserted, so anything that failed looks "changed" again next run.

Usage::

    from corpus_ingest.history import JsonFingerprintStore
    from corpus_ingest.ingestion.driver import IngestionDriver
    from corpus_ingest.ingestion.fingerprint import ChangeDetector
    from corpus_ingest.vectorstore import ChromaVectorIndex

    driver = IngestionDriver(
        ChangeDetector(JsonFingerprintStore("history")),
        ChromaVectorIndex(),
    )
    report = driver.run("docs")
    print(report.summary())
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from corpus_ingest.config import get_settings
from corpus_ingest.errors import FileIngestionError, HashingError, LoadError, SplitError, UpsertError
from corpus_ingest.ingestion.batching import make_batches
from corpus_ingest.ingestion.fingerprint import ChangeDetector
from corpus_ingest.ingestion.models import DirectoryResult, DirectoryState, FileResult, RunReport
from corpus_ingest.ingestion.scanner import list_directories, list_eligible_files
from corpus_ingest.vectorstore.base import VectorIndexBase

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)

Loader = Callable[[Path], "list[Document]"]
Splitter = Callable[["list[Document]"], "list[Document]"]


def _default_loader(path: Path) -> list[Document]:
    from corpus_ingest.ingestion.loader import load_pdf

    return load_pdf(path)


def _default_splitter(documents: list[Document]) -> list[Document]:
    from corpus_ingest.ingestion.chunker import chunk_documents

    return chunk_documents(documents)


class IngestionDriver:
    """Walk a corpus and (re-)ingest the directories that changed.

    Parameters
    ----------
    detector:
        Decides per directory whether ingestion is needed, and owns the
        fingerprint store the result is recorded in.
    index:
        Destination vector index.
    loader:
        ``path -> list[Document]``; defaults to the PDF loader.
    splitter:
        ``list[Document] -> list[Document]``; defaults to
        :func:`~corpus_ingest.ingestion.chunker.chunk_documents`.
    batch_size:
        Max chunks per upsert call; defaults to settings.
    """

    def __init__(
        self,
        detector: ChangeDetector,
        index: VectorIndexBase,
        *,
        loader: Loader | None = None,
        splitter: Splitter | None = None,
        batch_size: int | None = None,
        exclude: Sequence[str] | None = None,
    ) -> None:
        if batch_size is None:
            batch_size = get_settings().upsert_batch_size
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.detector = detector
        self.index = index
        self.loader = loader or _default_loader
        self.splitter = splitter or _default_splitter
        self.batch_size = batch_size
        self.exclude = tuple(exclude) if exclude is not None else detector.exclude

    @property
    def extension(self) -> str:
        return self.detector.extension

    # -- public API -----------------------------------------------------------

    def run(self, root: str | Path, *, dry_run: bool = False) -> RunReport:
        """Process every topic directory under *root*.

        Raises
        ------
        RootScanError
            When *root* cannot be listed.  Nothing else escapes.
        """
        root = Path(root)
        report = RunReport(root=str(root))
        for directory in list_directories(root, exclude=self.exclude):
            report.directories.append(self.process_directory(directory, dry_run=dry_run))
        logger.info("Ingestion finished for %s: %s", root, report.summary())
        return report

    def process_directory(self, directory: str | Path, *, dry_run: bool = False) -> DirectoryResult:
        directory = Path(directory)
        result = DirectoryResult(directory_id=directory.name, path=str(directory))

        result.state = DirectoryState.CHECKING
        try:
            decision = self.detector.detect(directory)
        except HashingError as exc:
            result.state = DirectoryState.SKIPPED
            result.reason = f"hashing failed: {exc}"
            logger.error("Skipping %s: %s", result.directory_id, result.reason)
            return result

        if not decision.changed:
            result.state = DirectoryState.SKIPPED
            result.reason = "unchanged"
            logger.info("Skipping %s: unchanged", result.directory_id)
            return result

        result.state = DirectoryState.PROCESSING
        if dry_run:
            result.reason = "changed (dry run)"
            logger.info("Would ingest %s (dry run)", result.directory_id)
            return result

        namespace = directory.name
        try:
            files = list_eligible_files(directory, extension=self.extension, exclude=self.exclude)
        except OSError as exc:
            result.state = DirectoryState.PARTIALLY_FAILED
            result.reason = f"cannot list files: {exc}"
            logger.error("Ingestion of %s failed: %s", result.directory_id, result.reason)
            return result

        logger.info("Processing %s: %d file(s) → namespace %r", result.directory_id, len(files), namespace)
        for path in files:
            result.files.append(self.process_file(path, namespace))

        failed = result.failed_files
        if failed:
            result.state = DirectoryState.PARTIALLY_FAILED
            result.reason = f"{len(failed)} of {len(files)} file(s) failed"
            logger.warning(
                "Fingerprint for %s withheld: %s; they will be retried next run",
                result.directory_id,
                result.reason,
            )
            return result

        result.state = DirectoryState.COMPLETED
        result.fingerprint_written = self.detector.store.write(result.directory_id, decision.current)
        logger.info("Completed %s (%d file(s))", result.directory_id, len(files))
        return result

    def process_file(self, path: str | Path, namespace: str) -> FileResult:
        """Run load → split → upsert for one file; failures stay in the result."""
        path = Path(path)
        result = FileResult(path=str(path), namespace=namespace)
        logger.info("Processing file: %s", path.name)
        try:
            chunks = self._load_and_split(path, namespace)
            result.chunks = len(chunks)
            for batch in make_batches(chunks, namespace, self.batch_size):
                try:
                    self.index.upsert(batch.chunks, namespace)
                except Exception as exc:
                    raise UpsertError(path, str(exc), batch_index=batch.index) from exc
                result.batches_upserted += 1
        except FileIngestionError as exc:
            result.error = str(exc)
            logger.error("File %s failed: %s", path.name, exc)
            return result

        result.ok = True
        logger.info(
            "File %s processed (%d chunks, %d batches)",
            path.name,
            result.chunks,
            result.batches_upserted,
        )
        return result

    # -- internals ------------------------------------------------------------

    def _load_and_split(self, path: Path, namespace: str) -> list[Document]:
        try:
            documents = self.loader(path)
        except Exception as exc:
            raise LoadError(path, str(exc)) from exc

        try:
            chunks = self.splitter(documents)
        except Exception as exc:
            raise SplitError(path, str(exc)) from exc

        for idx, chunk in enumerate(chunks):
            chunk.metadata["chunk_index"] = idx
            chunk.metadata["namespace"] = namespace
            chunk.metadata.setdefault("source", str(path))
        return chunks
