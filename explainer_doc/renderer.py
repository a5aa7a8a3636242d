"""Projection of a parsed document and its collapse state into a view."""

from __future__ import annotations

from collections.abc import Sequence

from .models import (
    Blockquote,
    BlockNode,
    CodeBlock,
    Disclosure,
    Heading,
    ListBlock,
    Paragraph,
    Rule,
    Table,
    ViewNode,
)
from .state import CollapseState


def project(
    tree: Sequence[BlockNode],
    collapse_state: CollapseState,
    highlight: str | None = None,
) -> list[ViewNode]:
    """Project a document into the nodes the presentation layer should show.

    Headings stay visible so they remain clickable. Collapsing a heading hides
    everything up to the next heading of equal or higher rank, nested headings
    included; the collapse state of a nested heading is irrelevant while an
    ancestor is collapsed.

    Args:
        tree: Top-level blocks of a parsed document.
        collapse_state: Collapse state to apply.
        highlight: Heading id carrying the transient navigation highlight.

    Returns:
        list[ViewNode]: Visible nodes in document order.

    Examples:
        project(tree, CollapseState())  # every node, unchanged
    """
    view: list[ViewNode] = []
    # Open sections as (level, heading id, collapsed), outermost first.
    scopes: list[tuple[int, str, bool]] = []

    for node in tree:
        if isinstance(node, Heading):
            while scopes and scopes[-1][0] >= node.level:
                scopes.pop()
            hidden = any(collapsed for _, _, collapsed in scopes)
            collapsed = collapse_state.is_collapsed(node.id)
            scopes.append((node.level, node.id, collapsed))
            if not hidden:
                view.append(
                    ViewNode(
                        node=node,
                        section_id=node.id,
                        collapsed=collapsed,
                        highlighted=node.id == highlight,
                    )
                )
            continue

        if any(collapsed for _, _, collapsed in scopes):
            continue
        view.append(ViewNode(node=node, section_id=scopes[-1][1] if scopes else None))

    return view


def _render_block(node: BlockNode) -> str:
    if isinstance(node, Heading):
        return f"{'#' * node.level} {node.text}"
    if isinstance(node, Paragraph):
        return node.text
    if isinstance(node, ListBlock):
        lines = []
        for number, item in enumerate(node.items, start=1):
            marker = f"{number}." if node.ordered else "-"
            continuation = "\n" + " " * (len(marker) + 1)
            lines.append(f"{marker} {item.replace(chr(10), continuation)}")
        return "\n".join(lines)
    if isinstance(node, CodeBlock):
        return f"```{node.language or ''}\n{node.code}\n```"
    if isinstance(node, Table):
        rows = [node.header, tuple("---" for _ in node.header), *node.rows]
        return "\n".join("| " + " | ".join(row) + " |" for row in rows)
    if isinstance(node, Blockquote):
        inner = _render_blocks(node.children)
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
    if isinstance(node, Disclosure):
        inner = _render_blocks(node.children)
        return f"<details>\n<summary>{node.summary}</summary>\n\n{inner}\n</details>"
    if isinstance(node, Rule):
        return "---"
    raise TypeError(f"Unsupported block node: {node!r}")


def _render_blocks(nodes: Sequence[BlockNode]) -> str:
    return "\n\n".join(_render_block(node) for node in nodes)


def render_markdown(view: Sequence[ViewNode], collapsed_marker: str = "[+]") -> str:
    """Serialize a projected view back to Markdown text.

    Collapsed headings are suffixed with `collapsed_marker` so readers can
    tell that content was hidden.

    Examples:
        render_markdown(project(tree, state))
    """
    chunks = []
    for view_node in view:
        text = _render_block(view_node.node)
        if view_node.collapsed and collapsed_marker:
            text = f"{text} {collapsed_marker}"
        chunks.append(text)
    return "\n\n".join(chunks) + "\n" if chunks else ""
