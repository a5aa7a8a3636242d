from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from explainer_doc.exceptions import DocumentError, DocumentTooLargeError, ReadDocumentError
from explainer_doc.filesystem import (
    MAX_FILE_SIZE_ENV_VAR,
    FileExportSink,
    contains_symlink,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    read_document,
    safe_read,
)


def test_get_max_file_size_uses_default(monkeypatch):
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)

    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "2048")

    assert get_max_file_size(default=1) == 2048


@pytest.mark.parametrize("value", ["invalid", "0", "-5"])
def test_get_max_file_size_rejects_bad_values(monkeypatch, value: str):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, value)

    with pytest.raises(ValueError):
        get_max_file_size()


def test_normalize_filepath_missing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.md"))


def test_normalize_filepath_rejects_directory(tmp_path: Path):
    directory = tmp_path / "notes.md"
    directory.mkdir()

    with pytest.raises(ValueError, match="not a regular file"):
        normalize_filepath(str(directory))


def test_normalize_filepath_accepts_markdown_extensions(tmp_path: Path):
    target = tmp_path / "Explanation.MARKDOWN"
    target.write_text("# Title\n", encoding="utf-8")

    assert normalize_filepath(str(target)) == target.resolve()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_contains_symlink_detects_parent_links(tmp_path: Path):
    real_dir = tmp_path / "real"
    real_dir.mkdir()
    (real_dir / "doc.md").write_text("# Title\n", encoding="utf-8")
    linked_dir = tmp_path / "linked"
    try:
        linked_dir.symlink_to(real_dir, target_is_directory=True)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    assert contains_symlink(linked_dir / "doc.md") is True
    assert contains_symlink(real_dir / "doc.md") is False


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("X" * 20, encoding="utf-8")

    enforce_file_size(target, 20)
    with pytest.raises(DocumentTooLargeError) as excinfo:
        enforce_file_size(target, 10)

    assert excinfo.value.size == 20
    assert excinfo.value.max_size == 10
    assert isinstance(excinfo.value, DocumentError)


def test_enforce_file_size_missing_file(tmp_path: Path):
    with pytest.raises(ReadDocumentError):
        enforce_file_size(tmp_path / "missing.md", 10)


def test_safe_read_missing_file(tmp_path: Path):
    with pytest.raises(ReadDocumentError, match="Error accessing"):
        safe_read(tmp_path / "missing.md")


def test_read_document_returns_text(tmp_path: Path, sample_document: str):
    target = tmp_path / "doc.md"
    target.write_text(sample_document, encoding="utf-8")

    assert read_document(target) == sample_document


def test_read_document_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_bytes(b"\xff\xfe")

    with pytest.raises(ReadDocumentError, match="Invalid UTF-8"):
        read_document(target)


def test_file_export_sink_replaces_file_and_keeps_permissions(tmp_path: Path):
    target = tmp_path / "out.md"
    target.write_text("old", encoding="utf-8")
    os.chmod(target, 0o600)

    FileExportSink(target).write("# New\n")

    assert target.read_text(encoding="utf-8") == "# New\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert sorted(path.name for path in tmp_path.iterdir()) == ["out.md"]


def test_file_export_sink_creates_new_file(tmp_path: Path):
    target = tmp_path / "fresh.md"

    FileExportSink(target).write("text\n")

    assert target.read_text(encoding="utf-8") == "text\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
