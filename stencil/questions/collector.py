"""Conditional answer collection.

Walks the stabilised question order once, asks every question whose
``depends_on`` is satisfied by the answers gathered so far, and records the
answers in an insertion-ordered mapping.  Hidden questions get no entry, so
any later predicate that references them evaluates to ``False``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from stencil.questions.graph import question_order
from stencil.questions.models import (
    Answer,
    Dependency,
    DependencyKind,
    Predicate,
    Question,
    QuestionType,
    load_questions,
)
from stencil.questions.prompts import Prompter

logger = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool | None:
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def check_predicate(predicate: Predicate, answers: dict[str, Answer]) -> bool:
    """Return ``True`` when the recorded answer matches the predicate.

    Strings compare by equality, lists by membership, and bools against the
    expected value parsed as ``true``/``false``.  A missing answer or an
    unparseable bool is simply ``False``.
    """
    if predicate.question not in answers:
        return False
    answer = answers[predicate.question]
    if isinstance(answer, bool):
        expected = _parse_bool(predicate.expected)
        return expected is not None and answer == expected
    if isinstance(answer, list):
        return predicate.expected in answer
    return answer == predicate.expected


def is_visible(dependency: Dependency | None, answers: dict[str, Answer]) -> bool:
    """Evaluate a question's ``depends_on`` against the answers so far."""
    if dependency is None:
        return True
    results = (check_predicate(p, answers) for p in dependency.predicates)
    if dependency.kind is DependencyKind.CONDITION:
        return next(results)
    if dependency.kind is DependencyKind.ALL:
        return all(results)
    if dependency.kind is DependencyKind.ANY:
        return any(results)
    raise ValueError(f"Unknown dependency kind: {dependency.kind!r}")


class AnswerCollector:
    """Asks the visible questions of a blueprint in dependency order."""

    def __init__(self, prompter: Prompter) -> None:
        self.prompter = prompter

    def collect(self, questions: list[Question]) -> dict[str, Answer]:
        """Ask *questions* and return the answers keyed by question id.

        The ordering is computed before anything is asked, so a dependency
        cycle fails the run without prompting at all.

        Raises:
            CycleDetectedError: If the questions depend on each other cyclically.
            PromptError: If a prompt fails or is cancelled.
        """
        by_id = {q.id: q for q in questions}
        answers: dict[str, Answer] = {}

        for question_id in question_order(questions):
            question = by_id[question_id]
            if not is_visible(question.depends_on, answers):
                logger.debug("Skipping question %s: dependency not satisfied", question_id)
                continue
            answers[question_id] = self.ask(question)

        return answers

    def collect_from_file(self, path: str | Path) -> dict[str, Answer]:
        """Load a question file and collect its answers."""
        return self.collect(load_questions(path))

    def ask(self, question: Question) -> Answer:
        """Ask a single question with the widget matching its type."""
        prompter = self.prompter
        if question.type is QuestionType.TEXT:
            return prompter.text(question.id, question.help)
        if question.type is QuestionType.PARAGRAPH:
            return prompter.paragraph(question.id, question.help)
        if question.type is QuestionType.CONFIRM:
            return prompter.confirm(question.id, question.help)
        if question.type is QuestionType.SELECT:
            return prompter.select(question.id, list(question.choices or []), question.help)
        if question.type is QuestionType.MULTI_SELECT:
            return prompter.multi_select(question.id, list(question.choices or []), question.help)
        raise ValueError(f"Unknown question type: {question.type!r}")
