"""Data models for explainer-doc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class ParserState(Enum):
    """Parser states used while scanning Markdown content.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


@dataclass
class ParserContext:
    """Encapsulate fence state while walking Markdown text.

    Attributes:
        state: Current parser state.
        fence_char: Fence character that opened a fenced code block, if any.
        fence_length: Number of fence characters that opened the block.
        fence_indent_columns: Indentation width preceding the opening fence.
        language: First word of the opening fence's info string, if any.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0
    fence_indent_columns: int = 0
    language: str | None = None


@dataclass(frozen=True)
class Heading:
    """A section heading.

    Attributes:
        level: Heading rank, 1 through 6.
        text: Plain-text content with inline markup removed.
        id: Document-unique slug derived from `text`.
    """

    level: int
    text: str
    id: str


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[str, ...]


@dataclass(frozen=True)
class CodeBlock:
    """A fenced or indented code block.

    The language tag only drives syntax highlighting in the presentation layer.
    """

    language: str | None
    code: str


@dataclass(frozen=True)
class Table:
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class Blockquote:
    children: tuple["BlockNode", ...]


@dataclass(frozen=True)
class Disclosure:
    """A collapsible ``<details>`` block, typically hiding a quiz answer."""

    summary: str
    children: tuple["BlockNode", ...]


@dataclass(frozen=True)
class Rule:
    pass


BlockNode = Union[Heading, Paragraph, ListBlock, CodeBlock, Table, Blockquote, Disclosure, Rule]


@dataclass(frozen=True)
class SectionKey:
    """A canonical topic the host application expects a document to contain.

    Attributes:
        key: Stable identifier used by navigation entries (``"core-concepts"``).
        label: Human-readable label, also used for fallback matching.
        keywords: Lowercase substrings that identify the section's heading.

    Examples:
        SectionKey("quiz", "Quiz", ("quiz", "knowledge check"))
    """

    key: str
    label: str
    keywords: tuple[str, ...] = ()


@dataclass
class Section:
    """A heading together with the sections nested beneath it."""

    heading: Heading
    children: list[Section] = field(default_factory=list)


@dataclass(frozen=True)
class ViewNode:
    """A block node as projected for the presentation layer.

    Attributes:
        node: The original block node, unchanged.
        section_id: Id of the nearest enclosing heading, or None before the
            first heading. Headings reference themselves.
        collapsed: True for a heading whose section body is hidden.
        highlighted: True for the heading currently carrying the transient
            navigation highlight.
    """

    node: BlockNode
    section_id: str | None
    collapsed: bool = False
    highlighted: bool = False


class NavigationStatus(Enum):
    FOUND = auto()
    FOUND_BY_FALLBACK = auto()
    NOT_FOUND = auto()


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a navigation request.

    Attributes:
        status: How the target was resolved.
        heading_id: Id of the targeted heading; None when not found.
    """

    status: NavigationStatus
    heading_id: str | None = None

    @property
    def found(self) -> bool:
        return self.status is not NavigationStatus.NOT_FOUND


@dataclass(frozen=True)
class ScrollSignal:
    """Fire-and-forget instruction for the presentation layer.

    Attributes:
        heading_id: Heading to scroll into view.
        offset: Vertical offset applied after scrolling; negative values leave
            room for a fixed overlay header.
        highlight_seconds: How long the transient highlight stays visible.
    """

    heading_id: str
    offset: int
    highlight_seconds: float


@dataclass(frozen=True)
class QuizQuestion:
    """A quiz question discovered in a document.

    Attributes:
        id: Document-order identifier (``"question-1"``).
        prompt: Question text.
        options: Answer choices, possibly empty for free-text questions.
        answer: Correct answer text, or None when the document omits it.
    """

    id: str
    prompt: str
    options: tuple[str, ...] = ()
    answer: str | None = None


@dataclass(frozen=True)
class QuizResult:
    is_correct: bool
