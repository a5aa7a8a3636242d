"""Narrow interfaces to the collaborators surrounding the engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentGenerator(Protocol):
    """Produces complete document text for a topic, e.g. via a language model."""

    def produce_document(self, topic: str, **options: object) -> str: ...


@runtime_checkable
class PersistenceService(Protocol):
    """Stores saved documents. The engine never calls it directly.

    The surrounding application persists the text and collapse snapshot that
    `DocumentSession.snapshot` exposes.
    """

    def save(self, topic: str, text: str) -> str: ...

    def list(self) -> list[str]: ...

    def delete(self, handle: str) -> bool: ...


@runtime_checkable
class ExportSink(Protocol):
    """Receives rendered document text, such as a clipboard or a file."""

    def write(self, text: str) -> None: ...
