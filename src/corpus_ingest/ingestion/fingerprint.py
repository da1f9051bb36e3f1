"""Content fingerprinting and change detection for topic directories.

The fingerprint of a directory is derived only from its eligible files:

    file digest  = sha256(file bytes)
    dir digest   = sha256(for each (relpath, file digest) sorted by relpath:
                          relpath + "\\0" + file digest + "\\n")

Relative paths use POSIX separators and the directory's own name is not
part of the digest, so two trees with the same eligible content and layout
hash identically wherever they live and however the OS orders entries.
"""

from __future__ import annotations

import hashlib
import logging
import os
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from corpus_ingest.errors import HashingError
from corpus_ingest.history.base import FingerprintStore
from corpus_ingest.ingestion.models import ChangeDecision, Fingerprint
from corpus_ingest.ingestion.scanner import is_eligible_file, is_excluded, resolve_policy

logger = logging.getLogger(__name__)

_BLOCK_SIZE = 65536


def _file_digest(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as fh:
        for block in iter(lambda: fh.read(_BLOCK_SIZE), b""):
            h.update(block)
    return h.hexdigest()


def _walk_error(exc: OSError) -> None:
    raise exc


def compute_fingerprint(
    directory: str | Path,
    *,
    extension: str | None = None,
    exclude: Sequence[str] | None = None,
) -> Fingerprint:
    """Hash every eligible file below *directory* (recursively).

    Subdirectories whose name matches an *exclude* glob are pruned along
    with everything beneath them.

    Raises
    ------
    HashingError
        On any filesystem error while walking or reading.
    """
    extension, exclude = resolve_policy(extension, exclude)
    directory = Path(directory)
    if not directory.is_dir():
        raise HashingError(f"Not a directory: {directory}")

    children: dict[str, str] = {}
    try:
        for dirpath, dirnames, filenames in os.walk(directory, onerror=_walk_error):
            dirnames[:] = [d for d in dirnames if not is_excluded(d, exclude)]
            base = Path(dirpath)
            for name in filenames:
                if not is_eligible_file(name, extension=extension, exclude=exclude):
                    continue
                path = base / name
                children[path.relative_to(directory).as_posix()] = _file_digest(path)
    except OSError as exc:
        raise HashingError(f"Hashing failed for {directory}: {exc}") from exc

    h = hashlib.sha256()
    for relpath in sorted(children):
        h.update(f"{relpath}\0{children[relpath]}\n".encode())

    return Fingerprint(
        directory_id=directory.name,
        hash=h.hexdigest(),
        children=dict(sorted(children.items())),
        computed_at=datetime.now(timezone.utc),
    )


class ChangeDetector:
    """Compare a directory's current fingerprint with the stored one.

    Parameters
    ----------
    store:
        Where previous fingerprints are read from.
    extension / exclude:
        Eligibility policy forwarded to :func:`compute_fingerprint`.
    """

    def __init__(
        self,
        store: FingerprintStore,
        *,
        extension: str | None = None,
        exclude: Sequence[str] | None = None,
    ) -> None:
        self.store = store
        self.extension, self.exclude = resolve_policy(extension, exclude)

    def compute_fingerprint(self, directory: str | Path) -> Fingerprint:
        return compute_fingerprint(directory, extension=self.extension, exclude=self.exclude)

    def detect(self, directory: str | Path) -> ChangeDecision:
        """Return the full comparison; propagates :class:`HashingError`."""
        current = self.compute_fingerprint(directory)
        previous = self.store.read(current.directory_id)
        changed = current.hash != previous.hash
        if changed:
            logger.info(
                "Changes detected in %s (new=%s prev=%s)",
                current.directory_id,
                current.hash[:12],
                previous.hash[:12] or "<none>",
            )
        else:
            logger.info("No changes detected in %s", current.directory_id)
        return ChangeDecision(
            directory_id=current.directory_id,
            changed=changed,
            current=current,
            previous=previous,
        )

    def has_changed(self, directory: str | Path) -> bool:
        return self.detect(directory).changed
