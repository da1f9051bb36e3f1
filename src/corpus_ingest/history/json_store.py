"""JSON-file implementation of the fingerprint store.

Layout: one ``<history_dir>/<directory_id>.json`` file per directory.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from corpus_ingest.config import get_settings
from corpus_ingest.errors import FingerprintReadError, FingerprintWriteError
from corpus_ingest.history.base import FingerprintStore
from corpus_ingest.ingestion.models import Fingerprint


class JsonFingerprintStore(FingerprintStore):
    """Fingerprint store backed by a directory of JSON files.

    Parameters
    ----------
    history_dir:
        Directory holding the records.  Created on first write; defaults to
        settings.
    """

    def __init__(self, history_dir: str | Path | None = None) -> None:
        self.history_dir = Path(history_dir if history_dir is not None else get_settings().history_dir)

    def path_for(self, directory_id: str) -> Path:
        return self.history_dir / f"{directory_id}.json"

    # -- FingerprintStore overrides -------------------------------------------

    def _load(self, directory_id: str) -> Fingerprint | None:
        path = self.path_for(directory_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise FingerprintReadError(f"{path}: {exc}") from exc

        try:
            fingerprint = Fingerprint.model_validate_json(raw)
        except ValidationError as exc:
            raise FingerprintReadError(f"{path}: malformed record ({exc.error_count()} errors)") from exc
        if not fingerprint.hash:
            raise FingerprintReadError(f"{path}: record has no hash")
        return fingerprint

    def _save(self, directory_id: str, fingerprint: Fingerprint) -> None:
        path = self.path_for(directory_id)
        data = fingerprint.model_dump_json(indent=2)
        try:
            self.history_dir.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in atomically.
            fd, tmp_name = tempfile.mkstemp(prefix=f".{directory_id}.", suffix=".tmp", dir=self.history_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise FingerprintWriteError(f"{path}: {exc}") from exc
