"""Filesystem helpers for explainer-doc."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS
from .exceptions import DocumentTooLargeError, ReadDocumentError

MAX_FILE_SIZE_ENV_VAR = "EXPLAINER_DOC_MAX_FILE_SIZE"

logger = logging.getLogger(__name__)


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed document size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["EXPLAINER_DOC_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str) -> Path:
    """Resolve and validate a document filepath.

    Args:
        raw_path: User-supplied path to a Markdown document (absolute or relative).

    Returns:
        Path: Absolute path to the document.

    Raises:
        ValueError: If the path does not exist, is not a regular file, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("docs/explanation.md")
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        error_message = f"{resolved} is not a Markdown document.\n"
        error_message += f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def enforce_file_size(filepath: Path, max_size: int) -> None:
    """Guard against documents that exceed the configured maximum size.

    Raises:
        ReadDocumentError: If the file cannot be inspected.
        DocumentTooLargeError: If the file is larger than `max_size` bytes.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise ReadDocumentError(f"Error accessing {filepath}: {error}") from error

    if not stat.S_ISREG(stat_result.st_mode):
        raise ReadDocumentError(f"{filepath} is not a regular file.")

    if stat_result.st_size > max_size:
        raise DocumentTooLargeError(stat_result.st_size, max_size)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Raises:
        ReadDocumentError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("explanation.md")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        raise ReadDocumentError(f"Error accessing {filepath}: {error}") from error


def read_document(filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> str:
    """Read a document after checking its size.

    Args:
        filepath: Path to the document.
        max_size: Maximum allowed size in bytes.

    Returns:
        str: The document text.

    Raises:
        DocumentTooLargeError: If the file exceeds `max_size`.
        ReadDocumentError: If the file cannot be read or is not valid UTF-8.
    """
    enforce_file_size(filepath, max_size)
    try:
        with safe_read(filepath) as handle:
            return handle.read()
    except UnicodeDecodeError as error:
        raise ReadDocumentError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error


class FileExportSink:
    """Export sink that atomically replaces a file with the exported text.

    Examples:
        session.export(FileExportSink(Path("out.md")))
    """

    def __init__(self, filepath: Path):
        self.filepath = filepath

    def write(self, text: str) -> None:
        permissions = (
            stat.S_IMODE(self.filepath.stat().st_mode) if self.filepath.exists() else 0o644
        )
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w", encoding="UTF-8", delete=False, dir=self.filepath.parent
            ) as tmp_file:
                temp_path = Path(tmp_file.name)
                tmp_file.write(text)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
                os.chmod(tmp_file.name, permissions)

            os.replace(temp_path, self.filepath)
            logger.debug("Exported %d characters to %s", len(text), self.filepath)
        finally:
            if temp_path is not None:
                Path(temp_path).unlink(missing_ok=True)
