"""Quiz question discovery and answer grading."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from .inline import plain_text
from .models import (
    Blockquote,
    BlockNode,
    Disclosure,
    Heading,
    ListBlock,
    Paragraph,
    QuizQuestion,
    QuizResult,
)

logger = logging.getLogger(__name__)

_ANSWER_LABEL = re.compile(r"^(?:correct\s+)?answer\s*[:：]\s*", re.IGNORECASE)
_OPTION_LETTER = re.compile(r"^\(?([A-Za-z])[.):]\s*")
_QUESTION_NUMBER = re.compile(r"^(?:question\s*)?\d+\s*[.:)]\s*", re.IGNORECASE)


def normalize_answer(text: str) -> str:
    return text.strip().casefold()


def grade(submitted: str, correct: str | None) -> bool:
    """Compare an answer against the correct one.

    Matching is exact apart from letter case and leading or trailing
    whitespace. A missing correct answer always grades as incorrect.

    Examples:
        grade(" Paris ", "paris")  # True
        grade("Par", "paris")  # False
    """
    if correct is None:
        return False
    return normalize_answer(submitted) == normalize_answer(correct)


class QuizEvaluator:
    """Record and grade a learner's answers per question id.

    Every submission overwrites the previous attempt for that question;
    there is no lockout after a wrong answer.

    Examples:
        evaluator = QuizEvaluator()
        evaluator.submit_answer("question-1", "Rome", "Paris").is_correct  # False
        evaluator.submit_answer("question-1", "paris", "Paris").is_correct  # True
    """

    def __init__(self):
        self.answers: dict[str, str] = {}
        self.results: dict[str, bool] = {}

    def submit_answer(self, question_id: str, submitted: str, correct: str | None) -> QuizResult:
        is_correct = grade(submitted, correct)
        self.answers[question_id] = submitted
        self.results[question_id] = is_correct
        logger.debug("Graded %s: %s", question_id, "correct" if is_correct else "incorrect")
        return QuizResult(is_correct=is_correct)

    def answer_for(self, question_id: str) -> str | None:
        return self.answers.get(question_id)

    def result_for(self, question_id: str) -> bool | None:
        return self.results.get(question_id)

    def score(self) -> tuple[int, int]:
        """Return the number of correct answers and of attempted questions."""
        return sum(self.results.values()), len(self.results)

    def reset(self) -> None:
        self.answers.clear()
        self.results.clear()


def _block_text(node: BlockNode) -> str | None:
    if isinstance(node, Heading):
        return node.text
    if isinstance(node, Paragraph):
        return plain_text(node.text)
    if isinstance(node, ListBlock) and node.items:
        return plain_text(node.items[0])
    if isinstance(node, Blockquote):
        for child in node.children:
            text = _block_text(child)
            if text:
                return text
    return None


def _extract_answer(disclosure: Disclosure, options: tuple[str, ...]) -> str | None:
    text = None
    for child in disclosure.children:
        text = _block_text(child)
        if text:
            break
    if not text:
        return None

    answer = _ANSWER_LABEL.sub("", text.split("\n")[0]).strip()
    if not answer:
        return None

    # "B" or "B)" on its own names a lettered option.
    letter = answer.rstrip(".):").strip()
    if len(letter) == 1 and letter.isalpha():
        for option in options:
            match = _OPTION_LETTER.match(option)
            if match and match.group(1).casefold() == letter.casefold():
                return option
    return answer


def extract_questions(tree: Sequence[BlockNode]) -> list[QuizQuestion]:
    """Collect quiz questions from the disclosure blocks of a document.

    Each disclosure block hides the answer to one question. The prompt is the
    nearest preceding heading or paragraph, and the options are the items of
    a list between that prompt and the disclosure. Ids follow document order
    (``question-1``, ``question-2``, ...).

    Args:
        tree: Top-level blocks of a parsed document.

    Returns:
        list[QuizQuestion]: Questions in document order.
    """
    questions: list[QuizQuestion] = []
    prompt = ""
    # Headings and paragraphs since the last disclosure, converted on demand.
    pending: list[BlockNode] = []
    options: tuple[str, ...] = ()

    def walk(nodes: Sequence[BlockNode]) -> None:
        nonlocal prompt, options
        for node in nodes:
            if isinstance(node, Disclosure):
                prompt = next(filter(None, map(_block_text, reversed(pending))), prompt)
                pending.clear()
                plain_options = tuple(plain_text(item) for item in options)
                questions.append(
                    QuizQuestion(
                        id=f"question-{len(questions) + 1}",
                        prompt=_QUESTION_NUMBER.sub("", prompt).strip() or prompt,
                        options=plain_options,
                        answer=_extract_answer(node, plain_options),
                    )
                )
                options = ()
            elif isinstance(node, (Heading, Paragraph)):
                pending.append(node)
                options = ()
            elif isinstance(node, ListBlock):
                options = node.items
            elif isinstance(node, Blockquote):
                walk(node.children)

    walk(tree)
    return questions
