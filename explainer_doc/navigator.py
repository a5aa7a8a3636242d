"""Scroll-to-section navigation with fallback heading matching."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence

from .constants import DEFAULT_HIGHLIGHT_SECONDS, DEFAULT_SCROLL_OFFSET, DEFAULT_SECTIONS
from .indexer import enclosing_heading_ids, iter_headings, section_label
from .models import (
    BlockNode,
    Heading,
    NavigationResult,
    NavigationStatus,
    ScrollSignal,
    SectionKey,
)
from .state import CollapseState

logger = logging.getLogger(__name__)

ScrollListener = Callable[[ScrollSignal], None]


def find_heading_by_label(tree: Sequence[BlockNode], label: str) -> Heading | None:
    """Return the first heading, at any level, whose text contains `label`.

    Matching is a case-insensitive substring test in document order.
    """
    needle = label.lower()
    for heading in iter_headings(tree):
        if needle in heading.text.lower():
            return heading
    return None


class Navigator:
    """Resolve section keys to headings and reveal them.

    Revealing a section force-expands it and every section enclosing it,
    notifies every scroll listener with a `ScrollSignal` and starts a transient
    highlight that expires on its own after `highlight_seconds`.

    Args:
        tree: Top-level blocks of the current document.
        index: Section index built for `tree`.
        collapse_state: Collapse state owned by the session.
        sections: Section taxonomy, used for fallback labels.
        scroll_offset: Offset carried by every scroll signal.
        highlight_seconds: Lifetime of the highlight.
        clock: Monotonic clock in seconds; injectable for tests.

    Examples:
        navigator = Navigator(tree, build_index(tree), CollapseState())
        navigator.subscribe(print)
        navigator.reveal_section("quiz")
    """

    def __init__(
        self,
        tree: Sequence[BlockNode],
        index: Mapping[str, str],
        collapse_state: CollapseState,
        sections: Sequence[SectionKey] = DEFAULT_SECTIONS,
        scroll_offset: int = DEFAULT_SCROLL_OFFSET,
        highlight_seconds: float = DEFAULT_HIGHLIGHT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.tree = tree
        self.index = index
        self.collapse_state = collapse_state
        self.sections = sections
        self.scroll_offset = scroll_offset
        self.highlight_seconds = highlight_seconds
        self.clock = clock
        self._listeners: list[ScrollListener] = []
        self._highlight: tuple[str, float] | None = None

    def subscribe(self, listener: ScrollListener) -> None:
        self._listeners.append(listener)

    def resolve(self, key: str) -> NavigationResult:
        """Find the heading for a section key without revealing it."""
        heading_id = self.index.get(key)
        if heading_id is not None:
            return NavigationResult(NavigationStatus.FOUND, heading_id)

        heading = find_heading_by_label(self.tree, section_label(key, self.sections))
        if heading is not None:
            return NavigationResult(NavigationStatus.FOUND_BY_FALLBACK, heading.id)

        return NavigationResult(NavigationStatus.NOT_FOUND)

    def reveal_section(self, key: str) -> NavigationResult:
        """Resolve a section key, expand its section and signal a scroll.

        Args:
            key: Canonical section key, such as ``"core-concepts"``.

        Returns:
            NavigationResult: ``FOUND`` when the index resolves the key,
                ``FOUND_BY_FALLBACK`` when a heading contains the key's label,
                otherwise ``NOT_FOUND``.
        """
        result = self.resolve(key)
        if not result.found:
            logger.info("No section found for %r", key)
            return result

        # A collapsed ancestor would keep the target hidden.
        for heading_id in (*enclosing_heading_ids(self.tree, result.heading_id), result.heading_id):
            self.collapse_state.force_expand(heading_id)
        self._highlight = (result.heading_id, self.clock() + self.highlight_seconds)

        signal = ScrollSignal(
            heading_id=result.heading_id,
            offset=self.scroll_offset,
            highlight_seconds=self.highlight_seconds,
        )
        for listener in self._listeners:
            listener(signal)

        logger.debug("Revealed %r at heading %r (%s)", key, result.heading_id, result.status.name)
        return result

    def active_highlight(self) -> str | None:
        """Return the highlighted heading id, or None once it has expired."""
        if self._highlight is None:
            return None

        heading_id, expires_at = self._highlight
        if self.clock() >= expires_at:
            self._highlight = None
            return None
        return heading_id
