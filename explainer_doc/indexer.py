"""Section index and outline construction over a parsed document."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

from .constants import DEFAULT_INDEX_MAX_LEVEL, DEFAULT_SECTIONS
from .models import Blockquote, BlockNode, Disclosure, Heading, Section, SectionKey

logger = logging.getLogger(__name__)


def iter_headings(tree: Iterable[BlockNode]) -> Iterator[Heading]:
    """Yield every heading in document order, including nested ones.

    Headings inside blockquotes and disclosure blocks are yielded where they
    appear.
    """
    for node in tree:
        if isinstance(node, Heading):
            yield node
        elif isinstance(node, (Blockquote, Disclosure)):
            yield from iter_headings(node.children)


def enclosing_heading_ids(tree: Sequence[BlockNode], heading_id: str) -> list[str]:
    """Return the ids of the top-level sections that contain a heading.

    Ids are ordered outermost first and follow the same rank rules as
    `renderer.project`. A heading nested in a blockquote or disclosure block is
    enclosed by every section open where that block appears. Unknown ids yield
    an empty list.

    Examples:
        tree = parse_document("# Topic\\n## Quiz\\n")
        enclosing_heading_ids(tree, "quiz")  # ["topic"]
    """
    scopes: list[Heading] = []

    for node in tree:
        if isinstance(node, Heading):
            while scopes and scopes[-1].level >= node.level:
                scopes.pop()
            if node.id == heading_id:
                return [scope.id for scope in scopes]
            scopes.append(node)
        elif isinstance(node, (Blockquote, Disclosure)):
            if any(heading.id == heading_id for heading in iter_headings(node.children)):
                return [scope.id for scope in scopes]

    return []


def build_index(
    tree: Sequence[BlockNode],
    sections: Sequence[SectionKey] = DEFAULT_SECTIONS,
    max_level: int = DEFAULT_INDEX_MAX_LEVEL,
) -> dict[str, str]:
    """Map canonical section keys to the heading ids found in a document.

    Only top-level headings of rank 1 through `max_level` are considered;
    deeper headings are sub-structure. Each heading is tested, in document
    order, against the keywords of every key in taxonomy order and belongs to
    the first key it matches. The first heading of a key wins: a later heading
    whose first match is an already resolved key is ignored rather than
    reassigned, so ``"Introduction and Applications"`` after ``"Introduction"``
    leaves ``applications`` unresolved. Keys no heading matches are left out.

    Args:
        tree: Top-level blocks of a parsed document.
        sections: Section taxonomy declared by the application.
        max_level: Deepest heading rank eligible for indexing.

    Returns:
        dict[str, str]: Section key to heading id for every resolved key.

    Examples:
        build_index(parse_document("# 📌 Quick Summary\\n"))  # {"summary": "quick-summary"}
    """
    index: dict[str, str] = {}

    for node in tree:
        if not isinstance(node, Heading) or node.level > max_level:
            continue

        lowered = node.text.lower()
        section = next(
            (
                section
                for section in sections
                if any(keyword.lower() in lowered for keyword in section.keywords)
            ),
            None,
        )
        if section is None:
            continue
        if section.key in index:
            logger.debug("Heading %r ignored, %r is already resolved", node.id, section.key)
            continue
        index[section.key] = node.id
        logger.debug("Section %r resolved to heading %r", section.key, node.id)

    unresolved = [section.key for section in sections if section.key not in index]
    if unresolved:
        logger.debug("Unresolved section keys: %s", ", ".join(unresolved))

    return index


def section_label(key: str, sections: Sequence[SectionKey] = DEFAULT_SECTIONS) -> str:
    """Return the human-readable label for a section key.

    Keys outside the taxonomy fall back to the key with hyphens turned into
    spaces, so ``"case-study"`` reads as ``"case study"``.
    """
    for section in sections:
        if section.key == key:
            return section.label
    return key.replace("-", " ")


def build_outline(tree: Sequence[BlockNode]) -> list[Section]:
    """Nest top-level headings into a section outline by rank.

    A heading becomes a child of the closest preceding heading with a smaller
    level.

    Examples:
        outline = build_outline(parse_document("# A\\n## B\\n# C\\n"))
        [section.heading.text for section in outline]  # ["A", "C"]
    """
    roots: list[Section] = []
    stack: list[Section] = []

    for node in tree:
        if not isinstance(node, Heading):
            continue

        section = Section(heading=node)
        while stack and stack[-1].heading.level >= node.level:
            stack.pop()
        if stack:
            stack[-1].children.append(section)
        else:
            roots.append(section)
        stack.append(section)

    return roots
