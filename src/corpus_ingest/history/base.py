"""Abstract base class for fingerprint-store backends.

A fingerprint store is a key-value map from directory id to the last
fingerprint that was fully ingested.  Adding a backend (Redis, a database
table, …) only requires subclassing :class:`FingerprintStore` and
implementing :meth:`~FingerprintStore._load` and
:meth:`~FingerprintStore._save`.

The public :meth:`~FingerprintStore.read` / :meth:`~FingerprintStore.write`
never raise: an unreadable record behaves exactly like a missing one, and a
failed write only means the directory is detected as changed next run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from corpus_ingest.errors import FingerprintReadError, FingerprintWriteError
from corpus_ingest.ingestion.models import Fingerprint

logger = logging.getLogger(__name__)


class FingerprintStore(ABC):
    """Backend-agnostic fingerprint persistence."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def _load(self, directory_id: str) -> Fingerprint | None:
        """Return the stored fingerprint, or ``None`` when there is none.

        Raise :class:`FingerprintReadError` when a record exists but cannot
        be read.  Any other exception is treated the same way by :meth:`read`.
        """
        ...

    @abstractmethod
    def _save(self, directory_id: str, fingerprint: Fingerprint) -> None:
        """Persist *fingerprint*, replacing any previous record.

        Raise :class:`FingerprintWriteError` on failure.  Any other exception
        is treated the same way by :meth:`write`.
        """
        ...

    # -- public API -----------------------------------------------------------

    def read(self, directory_id: str) -> Fingerprint:
        """Return the last persisted fingerprint or the empty sentinel."""
        try:
            stored = self._load(directory_id)
        except FingerprintReadError as exc:
            logger.warning("Ignoring unreadable fingerprint for %r: %s", directory_id, exc)
            return Fingerprint.empty(directory_id)
        except Exception:
            logger.exception("Fingerprint backend failed reading %r; treating it as unseen", directory_id)
            return Fingerprint.empty(directory_id)
        if stored is None:
            logger.debug("No fingerprint stored for %r", directory_id)
            return Fingerprint.empty(directory_id)
        return stored

    def write(self, directory_id: str, fingerprint: Fingerprint) -> bool:
        """Persist *fingerprint*; return ``False`` (and log) on failure."""
        try:
            self._save(directory_id, fingerprint)
        except FingerprintWriteError as exc:
            logger.error(
                "Could not store fingerprint for %r; it will be re-ingested next run: %s",
                directory_id,
                exc,
            )
            return False
        except Exception:
            logger.exception(
                "Fingerprint backend failed writing %r; it will be re-ingested next run", directory_id
            )
            return False
        logger.debug("Stored fingerprint %s for %r", fingerprint.hash[:12], directory_id)
        return True
