"""Interactive prompt widgets.

``Prompter`` is the interface the answer collector and the generator talk to;
``RichPrompter`` implements it on top of ``rich.prompt``.  Every widget blocks
until the user answers.  Ctrl-C / Ctrl-D surface as :class:`PromptError` so a
cancelled prompt aborts the whole run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from stencil.errors import PromptError
from stencil.utils import console as default_console


class Prompter(ABC):
    """Interface for the prompt collaborator.

    Implementations return the user's answer or raise :class:`PromptError`.
    """

    @abstractmethod
    def text(self, question: str, help: str = "") -> str:
        ...

    @abstractmethod
    def paragraph(self, question: str, help: str = "") -> str:
        ...

    @abstractmethod
    def confirm(self, question: str, help: str = "") -> bool:
        ...

    @abstractmethod
    def select(self, question: str, choices: list[str], help: str = "") -> str:
        ...

    @abstractmethod
    def multi_select(self, question: str, choices: list[str], help: str = "") -> list[str]:
        ...


class RichPrompter(Prompter):
    """Terminal prompts rendered with Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    # -- Widgets -------------------------------------------------------------

    def text(self, question: str, help: str = "") -> str:
        self._help(help)
        while True:
            answer = self._ask(question, lambda: Prompt.ask(escape(question), console=self.console))
            if answer.strip():
                return answer
            self.console.print(f"[red]{escape(question)} is required[/red]")

    def paragraph(self, question: str, help: str = "") -> str:
        self._help(help)
        self.console.print(f"[bold]{escape(question)}[/bold] [dim](finish with an empty line)[/dim]")
        lines: list[str] = []
        while True:
            line = self._ask(question, lambda: self.console.input("> "))
            if not line:
                return "\n".join(lines)
            lines.append(line)

    def confirm(self, question: str, help: str = "") -> bool:
        self._help(help)
        return self._ask(question, lambda: Confirm.ask(escape(question), console=self.console))

    def select(self, question: str, choices: list[str], help: str = "") -> str:
        self._help(help)
        return self._ask(
            question,
            lambda: Prompt.ask(escape(question), choices=choices, console=self.console),
        )

    def multi_select(self, question: str, choices: list[str], help: str = "") -> list[str]:
        self._help(help)
        for index, choice in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]. {escape(choice)}")
        while True:
            raw = self._ask(
                question,
                lambda: Prompt.ask(f"{escape(question)} (comma separated)", console=self.console),
            )
            selected = parse_selection(raw, choices)
            if selected:
                return selected
            self.console.print("[red]Select at least one of the listed choices[/red]")

    # -- Internal helpers ------------------------------------------------------

    def _help(self, help: str) -> None:
        if help:
            self.console.print(f"[dim]{escape(help)}[/dim]")

    @staticmethod
    def _ask(question, ask):
        try:
            return ask()
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptError(question, exc) from exc


def parse_selection(raw: str, choices: list[str]) -> list[str]:
    """Resolve a comma-separated list of choice names or 1-based indexes.

    Unknown entries make the whole selection invalid (an empty list is
    returned).  Duplicates are collapsed and the choice order is kept.
    """
    picked: set[str] = set()
    for token in (t.strip() for t in raw.split(",")):
        if not token:
            continue
        if token in choices:
            picked.add(token)
        elif token.isdigit() and 1 <= int(token) <= len(choices):
            picked.add(choices[int(token) - 1])
        else:
            return []
    return [choice for choice in choices if choice in picked]
