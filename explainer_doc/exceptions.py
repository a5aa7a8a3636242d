"""Package-specific exception types."""

from __future__ import annotations


class DocumentError(ValueError):
    """Base class for document-related errors.

    Parsing itself never raises; these cover loading documents from disk.
    """


class DocumentTooLargeError(DocumentError):
    """Raised when a document exceeds the configured maximum size.

    Args:
        size: Size of the document in bytes.
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Document is {self.size} bytes, exceeding the maximum allowed size of {self.max_size} bytes"


class ReadDocumentError(DocumentError):
    """Raised when a document file cannot be read or decoded."""
