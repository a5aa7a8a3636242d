"""Interactive session over a single open document."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Union

from .config import ViewerConfig, section_keys, validate_config
from .indexer import build_index, build_outline
from .interfaces import ContentGenerator, ExportSink
from .models import BlockNode, NavigationResult, QuizQuestion, QuizResult, Section, ViewNode
from .navigator import Navigator, ScrollListener
from .parser import parse_document
from .quiz import QuizEvaluator, extract_questions
from .renderer import project, render_markdown
from .state import CollapseState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeadingClicked:
    heading_id: str


@dataclass(frozen=True)
class NavigationRequested:
    key: str


@dataclass(frozen=True)
class AnswerSelected:
    question_id: str
    answer: str


SessionEvent = Union[HeadingClicked, NavigationRequested, AnswerSelected]


@dataclass(frozen=True)
class SessionSnapshot:
    """Raw text and collapse state, for the application to persist."""

    text: str
    collapsed: dict[str, bool] = field(default_factory=dict)


class DocumentSession:
    """Own the parsed document and all learner state for one open document.

    Loading a document replaces the tree, section index and quiz questions,
    and resets the collapse state. Quiz answers are keyed by question id and
    survive reloads.

    Args:
        config: Viewer configuration. Defaults to a new `ViewerConfig`.
        clock: Monotonic clock used for navigation highlights.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        session = DocumentSession()
        session.load(text)
        session.reveal_section("quiz")
        view = session.view()
    """

    def __init__(
        self, config: ViewerConfig | None = None, clock: Callable[[], float] = time.monotonic
    ):
        self.config = config or ViewerConfig()
        validate_config(self.config)
        self.sections = section_keys(self.config)
        self.clock = clock
        self.collapse_state = CollapseState()
        self.quiz = QuizEvaluator()
        self._listeners: list[ScrollListener] = []
        self.load("")

    def load(self, text: str) -> None:
        """Parse a document and rebuild everything derived from it."""
        self.text = text
        self.tree: list[BlockNode] = parse_document(text, self.config)
        self.index: dict[str, str] = build_index(
            self.tree, self.sections, max_level=self.config.index_max_level
        )
        self.outline: list[Section] = build_outline(self.tree)
        self.questions: dict[str, QuizQuestion] = {
            question.id: question for question in extract_questions(self.tree)
        }
        self.collapse_state.clear()
        self.navigator = Navigator(
            self.tree,
            self.index,
            self.collapse_state,
            sections=self.sections,
            scroll_offset=self.config.scroll_offset,
            highlight_seconds=self.config.highlight_seconds,
            clock=self.clock,
        )
        for listener in self._listeners:
            self.navigator.subscribe(listener)

        if text:
            logger.debug(
                "Loaded document: %d blocks, %d/%d sections indexed, %d questions",
                len(self.tree),
                len(self.index),
                len(self.sections),
                len(self.questions),
            )

    def load_from(self, generator: ContentGenerator, topic: str, **options: object) -> None:
        """Ask a content generator for a document and load it."""
        logger.info("Requesting document for topic %r", topic)
        self.load(generator.produce_document(topic, **options))

    def subscribe(self, listener: ScrollListener) -> None:
        """Register a scroll listener that survives document reloads."""
        self._listeners.append(listener)
        self.navigator.subscribe(listener)

    def toggle(self, heading_id: str) -> None:
        self.collapse_state.toggle(heading_id)

    def reveal_section(self, key: str) -> NavigationResult:
        return self.navigator.reveal_section(key)

    def submit_answer(self, question_id: str, submitted: str) -> QuizResult:
        """Grade an answer against the correct answer found in the document.

        Unknown questions, and questions whose answer the document omits,
        grade as incorrect.
        """
        question = self.questions.get(question_id)
        correct = question.answer if question is not None else None
        return self.quiz.submit_answer(question_id, submitted, correct)

    def handle(self, event: SessionEvent) -> NavigationResult | QuizResult | None:
        """Apply a user action coming from the presentation layer."""
        if isinstance(event, HeadingClicked):
            self.toggle(event.heading_id)
            return None
        if isinstance(event, NavigationRequested):
            return self.reveal_section(event.key)
        if isinstance(event, AnswerSelected):
            return self.submit_answer(event.question_id, event.answer)
        raise TypeError(f"Unsupported session event: {event!r}")

    def view(self) -> list[ViewNode]:
        return project(self.tree, self.collapse_state, highlight=self.navigator.active_highlight())

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(text=self.text, collapsed=self.collapse_state.snapshot())

    def restore(self, snapshot: SessionSnapshot) -> None:
        self.load(snapshot.text)
        self.collapse_state.restore(snapshot.collapsed)

    def export(self, sink: ExportSink, collapsed_marker: str = "[+]") -> None:
        """Write the current view, as Markdown, to an export sink."""
        sink.write(render_markdown(self.view(), collapsed_marker=collapsed_marker))
