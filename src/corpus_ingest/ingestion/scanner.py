"""Corpus discovery — topic directories and the eligible files inside them."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from corpus_ingest.config import get_settings
from corpus_ingest.errors import RootScanError

logger = logging.getLogger(__name__)


def resolve_policy(
    extension: str | None = None,
    exclude: Sequence[str] | None = None,
) -> tuple[str, tuple[str, ...]]:
    """Fill in whichever of *extension* / *exclude* is ``None`` from settings."""
    if extension is None or exclude is None:
        cfg = get_settings()
        extension = cfg.file_extension if extension is None else extension
        exclude = cfg.exclude_patterns if exclude is None else exclude
    return extension, tuple(exclude)


def is_excluded(name: str, exclude: Sequence[str]) -> bool:
    """Return ``True`` when *name* matches any of the *exclude* globs."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in exclude)


def is_eligible_file(
    name: str,
    *,
    extension: str | None = None,
    exclude: Sequence[str] | None = None,
) -> bool:
    """Shared eligibility rule for both fingerprinting and ingestion.

    The extension comparison is case-insensitive (``report.PDF`` counts).
    """
    extension, exclude = resolve_policy(extension, exclude)
    if is_excluded(name, exclude):
        return False
    return Path(name).suffix.lower() == extension.lower()


def list_directories(
    root: str | Path,
    *,
    exclude: Sequence[str] | None = None,
) -> Iterator[Path]:
    """Yield the immediate subdirectories of *root*, sorted by name.

    Each call re-reads the filesystem, so the result reflects its current
    state.  Grandchildren are never visited.

    Raises
    ------
    RootScanError
        When *root* does not exist, is not a directory, or is unreadable.
        Raised on first iteration.
    """
    _, exclude = resolve_policy("", exclude)
    root = Path(root)
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise RootScanError(f"Cannot list corpus root {root}: {exc}") from exc

    for entry in entries:
        if is_excluded(entry.name, exclude):
            logger.debug("Ignoring excluded directory %s", entry)
            continue
        if entry.is_dir():
            yield entry


def list_eligible_files(
    directory: str | Path,
    *,
    extension: str | None = None,
    exclude: Sequence[str] | None = None,
) -> list[Path]:
    """Return eligible files directly inside *directory*, sorted by name."""
    extension, exclude = resolve_policy(extension, exclude)
    directory = Path(directory)
    return sorted(
        (
            entry
            for entry in directory.iterdir()
            if entry.is_file() and is_eligible_file(entry.name, extension=extension, exclude=exclude)
        ),
        key=lambda p: p.name,
    )
