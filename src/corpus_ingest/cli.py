"""Command-line entry point.

    corpus-ingest                      # ingest ./docs, fingerprints in ./history
    corpus-ingest --docs-root corpus --dry-run
    python -m corpus_ingest --strict

Exit codes: 0 on a completed run (even if some files failed), 1 when the
run itself could not start or the corpus root is unreadable, 2 with
``--strict`` when any directory only partially ingested.
"""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from typing import TYPE_CHECKING

from pydantic import ValidationError

from corpus_ingest.config import Settings
from corpus_ingest.errors import RootScanError
from corpus_ingest.history import JsonFingerprintStore
from corpus_ingest.ingestion.chunker import chunk_documents
from corpus_ingest.ingestion.driver import IngestionDriver
from corpus_ingest.ingestion.fingerprint import ChangeDetector
from corpus_ingest.ingestion.loader import load_pdf
from corpus_ingest.vectorstore.base import VectorIndexBase

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger("corpus_ingest")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corpus-ingest",
        description="Incrementally ingest per-topic document directories into a vector index",
    )
    parser.add_argument("--docs-root", help="Corpus root; one subdirectory per topic")
    parser.add_argument("--history-dir", help="Directory holding per-topic fingerprints")
    parser.add_argument("--chunk-size", type=int, help="Max characters per chunk")
    parser.add_argument("--chunk-overlap", type=int, help="Characters shared by consecutive chunks")
    parser.add_argument("--batch-size", dest="upsert_batch_size", type=int, help="Max chunks per upsert")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, …)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report which directories changed; nothing is embedded or recorded",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 if any directory only partially ingested",
    )
    return parser


class _DryRunIndex(VectorIndexBase):
    """Stand-in index for ``--dry-run``; the driver never upserts then."""

    def upsert(self, chunks: list[Document], namespace: str) -> int:
        raise RuntimeError("upsert called during a dry run")

    def health_check(self) -> bool:
        return True


def build_index(cfg: Settings) -> VectorIndexBase:
    """Connect to Chroma with the configured embedding model."""
    from corpus_ingest.ingestion.embedder import get_embedding_function
    from corpus_ingest.vectorstore.chroma_store import ChromaVectorIndex

    return ChromaVectorIndex(
        host=cfg.chroma_host,
        port=cfg.chroma_port,
        collection_prefix=cfg.collection_prefix,
        embedder=get_embedding_function(cfg.embedding_model),
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    overrides = {
        key: value
        for key, value in vars(args).items()
        if key not in ("dry_run", "strict") and value is not None
    }

    try:
        cfg = Settings(**overrides)
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    detector = ChangeDetector(
        JsonFingerprintStore(cfg.history_dir),
        extension=cfg.file_extension,
        exclude=cfg.exclude_patterns,
    )

    try:
        index = _DryRunIndex() if args.dry_run else build_index(cfg)
        driver = IngestionDriver(
            detector,
            index,
            loader=load_pdf,
            splitter=partial(chunk_documents, chunk_size=cfg.chunk_size, chunk_overlap=cfg.chunk_overlap),
            batch_size=cfg.upsert_batch_size,
        )
        report = driver.run(cfg.docs_root, dry_run=args.dry_run)
    except RootScanError as exc:
        logger.error("Failed to ingest your data: %s", exc)
        return EXIT_ERROR
    except Exception:
        logger.exception("Failed to ingest your data")
        return EXIT_ERROR

    print(report.summary())
    if args.strict and report.has_failures:
        return EXIT_PARTIAL
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
