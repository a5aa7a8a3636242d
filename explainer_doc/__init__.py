"""
explainer-doc: section navigation engine for generated explanation documents.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    explainer-doc render explanation.md --collapse-all --reveal quiz

Library Usage:
    from explainer_doc import DocumentSession

    session = DocumentSession()
    session.load(text)
    result = session.reveal_section("core-concepts")
    view = session.view()
"""

from .config import ConfigError, ViewerConfig
from .constants import DEFAULT_SECTIONS
from .exceptions import DocumentError, DocumentTooLargeError, ReadDocumentError
from .indexer import build_index, build_outline, enclosing_heading_ids, iter_headings
from .models import (
    Blockquote,
    BlockNode,
    CodeBlock,
    Disclosure,
    Heading,
    ListBlock,
    NavigationResult,
    NavigationStatus,
    Paragraph,
    QuizQuestion,
    QuizResult,
    Rule,
    ScrollSignal,
    Section,
    SectionKey,
    Table,
    ViewNode,
)
from .navigator import Navigator
from .parser import parse_document
from .quiz import QuizEvaluator, extract_questions
from .renderer import project, render_markdown
from .session import (
    AnswerSelected,
    DocumentSession,
    HeadingClicked,
    NavigationRequested,
    SessionSnapshot,
)
from .slugify import SlugRegistry, generate_slug
from .state import CollapseState
from .toc import generate_toc_entries

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_document",
    "build_index",
    "build_outline",
    "iter_headings",
    "enclosing_heading_ids",
    "project",
    "render_markdown",
    "extract_questions",
    "generate_toc_entries",
    "generate_slug",
    # Stateful components
    "CollapseState",
    "Navigator",
    "QuizEvaluator",
    "DocumentSession",
    "SlugRegistry",
    # Data models
    "BlockNode",
    "Heading",
    "Paragraph",
    "ListBlock",
    "CodeBlock",
    "Table",
    "Blockquote",
    "Disclosure",
    "Rule",
    "SectionKey",
    "Section",
    "ViewNode",
    "NavigationResult",
    "NavigationStatus",
    "ScrollSignal",
    "QuizQuestion",
    "QuizResult",
    "SessionSnapshot",
    # Session events
    "HeadingClicked",
    "NavigationRequested",
    "AnswerSelected",
    # Configuration
    "ViewerConfig",
    "DEFAULT_SECTIONS",
    # Exceptions
    "ConfigError",
    "DocumentError",
    "DocumentTooLargeError",
    "ReadDocumentError",
    # Version
    "__version__",
]
