"""Main scaffolding orchestrator.

Takes a resolved ``Source`` and a blueprint name, asks the blueprint's
questions, stages the rendered tree in memory, shows a preview, and -- once
the user confirms -- applies it to disk inside a transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from stencil.config import Config
from stencil.questions.collector import AnswerCollector
from stencil.questions.models import Answer, load_questions
from stencil.questions.prompts import Prompter, RichPrompter
from stencil.scaffolder.preview import preview_as_tree
from stencil.scaffolder.templates import TemplateRenderer, build_context
from stencil.scaffolder.transaction import Transaction, TransactionState, apply_vfs
from stencil.scaffolder.vfs import VirtualFileSystem, build_vfs
from stencil.source import Source

logger = logging.getLogger(__name__)

CONFIRM_QUESTION = "Apply changes?"


class ApplyOutcome(str, Enum):
    """How a run ended."""
    COMMITTED = "committed"
    CANCELED = "canceled"


@dataclass
class GenerationResult:
    """Summary of a finished run."""

    outcome: ApplyOutcome
    destination: Path
    answers: dict[str, Answer] = field(default_factory=dict)
    vfs: VirtualFileSystem = field(default_factory=VirtualFileSystem)
    created: list[Path] = field(default_factory=list)

    @property
    def committed(self) -> bool:
        return self.outcome is ApplyOutcome.COMMITTED


class BlueprintGenerator:
    """Drives one scaffolding run for a resolved source.

    The preview callable receives the staged tree and the destination; it
    defaults to printing a Rich tree.
    """

    def __init__(
        self,
        source: Source,
        config: Config | None = None,
        prompter: Prompter | None = None,
        preview: Callable[[VirtualFileSystem, Path], Any] | None = None,
    ) -> None:
        self.source = source
        self.config = config or Config()
        self.prompter = prompter or RichPrompter()
        self.preview = preview or preview_as_tree

    # -- Public API --------------------------------------------------------

    def generate(self, blueprint: str, destination: str | Path) -> GenerationResult:
        """Scaffold *blueprint* into *destination*.

        Returns:
            A ``GenerationResult`` whose outcome is ``COMMITTED`` when every
            entry was written, or ``CANCELED`` when the user declined.

        Raises:
            StencilError: On any failure.  Anything written before the
                failure has already been rolled back.
        """
        destination = Path(destination)
        blueprint_dir = self.source.blueprint_dir(blueprint)
        logger.debug("Using blueprint %s at %s", blueprint, blueprint_dir)

        answers = self.collect_answers(blueprint_dir)
        vfs = self.stage(blueprint_dir, answers)

        self.preview(vfs, destination)

        created: list[Path] = []
        with Transaction() as trx:
            if self.prompter.confirm(CONFIRM_QUESTION):
                created = apply_vfs(vfs, destination, trx)
                trx.commit()
            else:
                trx.cancel()

        outcome = (
            ApplyOutcome.COMMITTED
            if trx.state is TransactionState.COMMITTED
            else ApplyOutcome.CANCELED
        )
        return GenerationResult(
            outcome=outcome,
            destination=destination,
            answers=answers,
            vfs=vfs,
            created=created,
        )

    # -- Pipeline steps ----------------------------------------------------

    def collect_answers(self, blueprint_dir: Path) -> dict[str, Answer]:
        """Load the blueprint's questions and ask the visible ones."""
        questions = load_questions(blueprint_dir / self.config.questions_file)
        return AnswerCollector(self.prompter).collect(questions)

    def stage(self, blueprint_dir: Path, answers: dict[str, Answer]) -> VirtualFileSystem:
        """Render the blueprint into an in-memory tree."""
        renderer = TemplateRenderer(blueprint_dir, build_context(answers))
        return build_vfs(
            blueprint_dir,
            renderer,
            template_suffix=self.config.template_suffix,
            questions_file=self.config.questions_file,
        )
