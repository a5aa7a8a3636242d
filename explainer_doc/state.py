"""Collapse state for document sections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class CollapseState:
    """Track which sections are collapsed, keyed by heading id.

    Keys are created lazily on first toggle; an absent key reads as expanded.
    The store only references headings by id, so it survives a rebuild of the
    tree. Ids that no longer exist after a reload are simply inert.

    Examples:
        state = CollapseState()
        state.toggle("introduction")
        state.is_collapsed("introduction")  # True
    """

    def __init__(self, collapsed: Mapping[str, bool] | None = None):
        self._collapsed: dict[str, bool] = dict(collapsed or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._collapsed!r})"

    def __len__(self) -> int:
        return len(self._collapsed)

    def toggle(self, heading_id: str) -> None:
        """Flip a section between collapsed and expanded."""
        self._collapsed[heading_id] = not self._collapsed.get(heading_id, False)

    def is_collapsed(self, heading_id: str) -> bool:
        return self._collapsed.get(heading_id, False)

    def force_expand(self, heading_id: str) -> None:
        """Expand a section regardless of its current state."""
        self._collapsed[heading_id] = False

    def collapse_all(self, heading_ids: Iterable[str]) -> None:
        for heading_id in heading_ids:
            self._collapsed[heading_id] = True

    def expand_all(self) -> None:
        for heading_id in self._collapsed:
            self._collapsed[heading_id] = False

    def clear(self) -> None:
        self._collapsed.clear()

    def snapshot(self) -> dict[str, bool]:
        """Return a copy of the state suitable for persistence."""
        return dict(self._collapsed)

    def restore(self, snapshot: Mapping[str, bool]) -> None:
        self._collapsed = {str(key): bool(value) for key, value in snapshot.items()}
