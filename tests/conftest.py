"""Shared pytest fixtures for the stencil test suite.

Provides reusable fixtures for:
- A scripted prompter that answers from a mapping
- A sample blueprint directory with conditional paths and templates
- A sample source root with a blueprint registry
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from stencil.errors import PromptError
from stencil.questions.prompts import Prompter
from stencil.source import BlueprintInfo, Source


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

class FakePrompter(Prompter):
    """Answers prompts from a ``{question: answer}`` mapping.

    Every question asked is appended to ``asked``.  A question missing from
    the mapping behaves like the user cancelling the prompt.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[str] = []

    def _answer(self, question: str) -> Any:
        self.asked.append(question)
        if question not in self.answers:
            raise PromptError(question, KeyboardInterrupt())
        return self.answers[question]

    def text(self, question: str, help: str = "") -> str:
        return self._answer(question)

    def paragraph(self, question: str, help: str = "") -> str:
        return self._answer(question)

    def confirm(self, question: str, help: str = "") -> bool:
        return self._answer(question)

    def select(self, question: str, choices: list[str], help: str = "") -> str:
        answer = self._answer(question)
        assert answer in choices, f"{answer!r} is not one of {choices}"
        return answer

    def multi_select(self, question: str, choices: list[str], help: str = "") -> list[str]:
        answer = self._answer(question)
        assert all(a in choices for a in answer)
        return answer


@pytest.fixture
def fake_prompter():
    """Factory fixture: ``fake_prompter({"name": "demo"})``."""
    return FakePrompter


# ---------------------------------------------------------------------------
# Blueprints
# ---------------------------------------------------------------------------

SAMPLE_QUESTIONS = textwrap.dedent(
    """\
    [project_name]
    type = "Text"
    help = "Name of the project"

    [use_docker]
    type = "Confirm"
    help = "Include a Dockerfile?"

    [base_image]
    type = "Select"
    help = "Docker base image"
    choices = ["python:3.12-slim", "python:3.12-alpine"]
    depends_on = "use_docker:true"

    [extras]
    type = "MultiSelect"
    help = "Optional tooling"
    choices = ["lint", "docs"]
    """
)


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def sample_blueprint(tmp_path: Path) -> Path:
    """A blueprint exercising conditional directories and template files."""
    root = tmp_path / "blueprints" / "python"
    write_tree(
        root,
        {
            "blueprint.toml": SAMPLE_QUESTIONS,
            "README.md": "# {{ not rendered }}\n",
            "pyproject.toml.j2": '[project]\nname = "{{ project_name | slugify }}"\n',
            "{{ project_name | snake_case }}/__init__.py.j2": '"""{{ project_name }}."""\n',
            "{% if use_docker %}docker{% endif %}/Dockerfile.j2": "FROM {{ base_image }}\n",
            "{% if use_docker %}docker{% endif %}/nested/compose.yml": "services: {}\n",
            "{% if 'docs' in extras %}docs{% endif %}/index.md": "docs\n",
        },
    )
    return root


@pytest.fixture
def sample_source(tmp_path: Path, sample_blueprint: Path) -> Source:
    """A source root whose registry points at ``sample_blueprint``."""
    root = tmp_path / "blueprints"
    (root / "blueprints.toml").write_text('[python]\npath = "./python"\n', encoding="utf-8")
    return Source(root=root, blueprints={"python": BlueprintInfo(path="./python")})
