"""Unit tests for the ``corpus-ingest`` command line."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import FakeVectorIndex, text_loader, write_files

from corpus_ingest import cli


@pytest.fixture()
def fake_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture()
def run_cli(fake_index: FakeVectorIndex):
    """Invoke ``cli.main`` with the index and PDF loader replaced by fakes."""

    def _run(*argv: str) -> int:
        with (
            patch.object(cli, "build_index", return_value=fake_index),
            patch.object(cli, "load_pdf", side_effect=text_loader),
        ):
            return cli.main(list(argv))

    return _run


def _args(docs_root: Path, history_dir: Path, *extra: str) -> list[str]:
    return ["--docs-root", str(docs_root), "--history-dir", str(history_dir), *extra]


def test_ingests_then_skips(
    run_cli, fake_index: FakeVectorIndex, docs_root: Path, history_dir: Path, capsys
) -> None:
    write_files(docs_root, {"A/a.pdf": "alpha " * 300})

    assert run_cli(*_args(docs_root, history_dir)) == cli.EXIT_OK
    assert (history_dir / "A.json").is_file()
    first_calls = len(fake_index.calls)
    assert first_calls > 0
    assert "1 completed" in capsys.readouterr().out

    assert run_cli(*_args(docs_root, history_dir)) == cli.EXIT_OK
    assert len(fake_index.calls) == first_calls
    assert "1 skipped" in capsys.readouterr().out


def test_batch_size_flag_is_honoured(
    run_cli, fake_index: FakeVectorIndex, docs_root: Path, history_dir: Path
) -> None:
    write_files(docs_root, {"A/a.pdf": "alpha " * 300})
    run_cli(*_args(docs_root, history_dir, "--chunk-size", "100", "--chunk-overlap", "10", "--batch-size", "3"))
    assert all(len(chunks) <= 3 for _, chunks in fake_index.calls)
    assert len(fake_index.calls) > 1


def test_missing_root_exits_non_zero(run_cli, tmp_path: Path, history_dir: Path) -> None:
    assert run_cli(*_args(tmp_path / "missing", history_dir)) == cli.EXIT_ERROR


def test_partial_failure_is_not_fatal_unless_strict(docs_root: Path, history_dir: Path) -> None:
    write_files(docs_root, {"B/b1.pdf": "one", "B/b2.pdf": "two"})
    failing = FakeVectorIndex(fail_on={"b2.pdf"})

    with (
        patch.object(cli, "build_index", return_value=failing),
        patch.object(cli, "load_pdf", side_effect=text_loader),
    ):
        assert cli.main(_args(docs_root, history_dir)) == cli.EXIT_OK
        assert cli.main(_args(docs_root, history_dir, "--strict")) == cli.EXIT_PARTIAL

    assert not (history_dir / "B.json").exists()


def test_dry_run_never_builds_index(docs_root: Path, history_dir: Path, capsys) -> None:
    write_files(docs_root, {"A/a.pdf": "alpha"})

    with patch.object(cli, "build_index") as build_index:
        assert cli.main(_args(docs_root, history_dir, "--dry-run")) == cli.EXIT_OK

    build_index.assert_not_called()
    assert not history_dir.exists()
    assert "1 changed" in capsys.readouterr().out


def test_invalid_configuration_exits_non_zero(docs_root: Path, history_dir: Path, capsys) -> None:
    code = cli.main(_args(docs_root, history_dir, "--chunk-size", "100", "--chunk-overlap", "100"))
    assert code == cli.EXIT_ERROR
    assert "chunk_overlap" in capsys.readouterr().err


def test_index_construction_failure_exits_non_zero(docs_root: Path, history_dir: Path) -> None:
    write_files(docs_root, {"A/a.pdf": "alpha"})
    with patch.object(cli, "build_index", side_effect=ConnectionError("chroma unreachable")):
        assert cli.main(_args(docs_root, history_dir)) == cli.EXIT_ERROR


def test_invalid_environment_is_reported_not_raised(
    docs_root: Path, history_dir: Path, monkeypatch, capsys
) -> None:
    monkeypatch.setenv("CHUNK_OVERLAP", "2000")
    assert cli.main(_args(docs_root, history_dir)) == cli.EXIT_ERROR
    assert "Invalid configuration" in capsys.readouterr().err
