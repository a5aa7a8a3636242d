from __future__ import annotations

import time

import pytest

from explainer_doc.config import ConfigError, ViewerConfig
from explainer_doc.interfaces import ContentGenerator, ExportSink, PersistenceService
from explainer_doc.models import Heading, NavigationStatus, QuizResult, ScrollSignal
from explainer_doc.session import (
    AnswerSelected,
    DocumentSession,
    HeadingClicked,
    NavigationRequested,
    SessionSnapshot,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class StaticGenerator:
    def __init__(self, text: str):
        self.text = text
        self.calls: list[tuple[str, dict]] = []

    def produce_document(self, topic: str, **options: object) -> str:
        self.calls.append((topic, options))
        return self.text


class MemorySink:
    def __init__(self):
        self.written: list[str] = []

    def write(self, text: str) -> None:
        self.written.append(text)


class MemoryStore:
    def __init__(self):
        self.saved: dict[str, str] = {}

    def save(self, topic: str, text: str) -> str:
        self.saved[topic] = text
        return topic

    def list(self) -> list[str]:
        return list(self.saved)

    def delete(self, handle: str) -> bool:
        return self.saved.pop(handle, None) is not None


@pytest.fixture()
def session(sample_document: str) -> DocumentSession:
    session = DocumentSession(clock=FakeClock())
    session.load(sample_document)
    return session


def test_new_session_is_empty():
    session = DocumentSession()

    assert session.tree == []
    assert session.index == {}
    assert session.questions == {}
    assert session.view() == []


def test_load_builds_index_outline_and_questions(session: DocumentSession):
    assert session.index["quiz"] == "interactive-quiz"
    assert [section.heading.id for section in session.outline] == ["quick-summary"]
    assert list(session.questions) == ["question-1", "question-2"]


def test_heading_clicked_toggles_collapse(session: DocumentSession):
    assert session.handle(HeadingClicked("core-concepts")) is None
    assert session.collapse_state.is_collapsed("core-concepts") is True

    session.handle(HeadingClicked("core-concepts"))
    assert session.collapse_state.is_collapsed("core-concepts") is False


def test_navigation_requested_reveals_and_highlights(session: DocumentSession):
    signals: list[ScrollSignal] = []
    session.subscribe(signals.append)
    session.toggle("how-it-works")

    result = session.handle(NavigationRequested("mechanism"))

    assert result.status is NavigationStatus.FOUND
    assert session.collapse_state.is_collapsed("how-it-works") is False
    assert [signal.heading_id for signal in signals] == ["how-it-works"]
    highlighted = [node.section_id for node in session.view() if node.highlighted]
    assert highlighted == ["how-it-works"]

    session.clock.now += 2.0
    assert not any(node.highlighted for node in session.view())


def test_navigation_reveals_section_under_collapsed_ancestor():
    session = DocumentSession(clock=FakeClock())
    session.load(
        "# Caching Explained\n\nIntro.\n\n## Quick Summary\n\nShort.\n\n## Interactive Quiz\n\nQ?\n"
    )
    session.toggle("caching-explained")
    assert [node.section_id for node in session.view()] == ["caching-explained"]

    result = session.reveal_section("quiz")

    assert result.heading_id == "interactive-quiz"
    headings = [node.section_id for node in session.view() if isinstance(node.node, Heading)]
    assert headings == ["caching-explained", "quick-summary", "interactive-quiz"]
    highlighted = [node.section_id for node in session.view() if node.highlighted]
    assert highlighted == ["interactive-quiz"]


def test_answer_selected_grades_against_document(session: DocumentSession):
    assert session.handle(AnswerSelected("question-2", " DICT ")) == QuizResult(is_correct=True)
    assert session.handle(AnswerSelected("question-1", "A) The value is returned from the cache")) == (
        QuizResult(is_correct=False)
    )
    assert session.quiz.score() == (1, 2)


def test_unknown_question_grades_incorrect(session: DocumentSession):
    assert session.submit_answer("question-7", "anything") == QuizResult(is_correct=False)


def test_unsupported_event_raises(session: DocumentSession):
    with pytest.raises(TypeError, match="Unsupported session event"):
        session.handle("click")  # type: ignore[arg-type]


def test_reload_resets_collapse_but_keeps_quiz_and_listeners(session: DocumentSession, sample_document: str):
    signals: list[ScrollSignal] = []
    session.subscribe(signals.append)
    session.toggle("introduction")
    session.submit_answer("question-2", "dict")

    session.load(sample_document)
    session.reveal_section("summary")

    assert session.collapse_state.is_collapsed("introduction") is False
    assert session.quiz.result_for("question-2") is True
    assert [signal.heading_id for signal in signals] == ["quick-summary"]


def test_snapshot_and_restore(session: DocumentSession, sample_document: str):
    session.toggle("introduction")
    snapshot = session.snapshot()

    assert snapshot == SessionSnapshot(text=sample_document, collapsed={"introduction": True})

    other = DocumentSession()
    other.restore(snapshot)

    assert other.text == sample_document
    assert other.collapse_state.is_collapsed("introduction") is True
    assert [node.node for node in other.view()] == [node.node for node in session.view()]


def test_load_from_content_generator(sample_document: str):
    generator = StaticGenerator(sample_document)
    session = DocumentSession()

    session.load_from(generator, "caching", depth="beginner")

    assert generator.calls == [("caching", {"depth": "beginner"})]
    assert session.index["summary"] == "quick-summary"


def test_export_writes_current_view(session: DocumentSession):
    sink = MemorySink()
    session.toggle("interactive-quiz")

    session.export(sink, collapsed_marker="(hidden)")

    assert len(sink.written) == 1
    exported = sink.written[0]
    assert "## 📝 Interactive Quiz (hidden)" in exported
    assert "Question 1" not in exported
    assert "cache = {}" in exported


def test_collaborators_satisfy_interfaces(sample_document: str):
    assert isinstance(StaticGenerator(sample_document), ContentGenerator)
    assert isinstance(MemorySink(), ExportSink)
    assert isinstance(MemoryStore(), PersistenceService)


def test_session_uses_configured_sections():
    config = ViewerConfig(sections=[{"key": "faq", "label": "FAQ", "keywords": ["faq"]}])
    session = DocumentSession(config)

    session.load("# FAQ\n\n## Summary\n")

    assert session.index == {"faq": "faq"}


def test_session_rejects_invalid_config():
    with pytest.raises(ConfigError):
        DocumentSession(ViewerConfig(highlight_seconds=0))


def test_load_stays_fast_on_unmatched_emphasis_openers():
    text = "# Quiz\n\n" + "*a " * 20000

    start = time.perf_counter()
    session = DocumentSession()
    session.load(text)
    elapsed = time.perf_counter() - start

    assert session.questions == {}
    assert elapsed < 2.0
