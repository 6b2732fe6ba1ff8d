"""Pydantic v2 models for blueprint questions.

A blueprint's question file is a TOML table mapping each question identifier
to its definition::

    [use_docker]
    type = "Confirm"
    help = "Ship a Dockerfile?"

    [base_image]
    type = "Select"
    help = "Base image"
    choices = ["python:3.12-slim", "python:3.12-alpine"]
    depends_on = "use_docker:true"

    [ci]
    type = "Select"
    help = "CI provider"
    choices = ["github", "gitlab"]
    depends_on = { any = ["use_docker:true", "license:MIT"] }

``depends_on`` is either a bare ``"question:expected"`` string (a single
condition) or a table with an ``all`` (AND) or ``any`` (OR) list of such
strings.  Any other key in a question table is rejected.
"""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from stencil.errors import FileFormat, FileOperation, FileOperationError, ParseError

# An answer is a plain string (Text, Paragraph, Select), a bool (Confirm), or
# a list of strings (MultiSelect).
Answer = str | bool | list[str]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class QuestionType(str, Enum):
    """The prompt widget used to ask a question."""
    TEXT = "Text"
    PARAGRAPH = "Paragraph"
    CONFIRM = "Confirm"
    SELECT = "Select"
    MULTI_SELECT = "MultiSelect"


class DependencyKind(str, Enum):
    """How the predicates of a dependency are combined."""
    CONDITION = "condition"
    ALL = "all"
    ANY = "any"


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

class Predicate(BaseModel):
    """``question:expected`` -- satisfied when the answer to *question* matches."""

    model_config = ConfigDict(frozen=True)

    question: str = Field(..., min_length=1)
    expected: str

    @classmethod
    def parse(cls, raw: str) -> "Predicate":
        """Parse the ``"question:expected"`` surface syntax."""
        if not isinstance(raw, str) or ":" not in raw:
            raise ValueError(f"dependency {raw!r} must have the form 'question:expected'")
        question, expected = raw.split(":", 1)
        return cls(question=question, expected=expected)

    def __str__(self) -> str:
        return f"{self.question}:{self.expected}"


class Dependency(BaseModel):
    """A visibility condition attached to a question."""

    model_config = ConfigDict(frozen=True)

    kind: DependencyKind
    predicates: list[Predicate] = Field(..., min_length=1)

    @classmethod
    def condition(cls, raw: str) -> "Dependency":
        return cls(kind=DependencyKind.CONDITION, predicates=[Predicate.parse(raw)])

    @classmethod
    def all_of(cls, raws: list[str]) -> "Dependency":
        return cls(kind=DependencyKind.ALL, predicates=[Predicate.parse(r) for r in raws])

    @classmethod
    def any_of(cls, raws: list[str]) -> "Dependency":
        return cls(kind=DependencyKind.ANY, predicates=[Predicate.parse(r) for r in raws])

    @classmethod
    def from_raw(cls, raw: Any) -> "Dependency":
        """Build a dependency from its TOML surface form."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            return cls.condition(raw)
        if isinstance(raw, dict) and len(raw) == 1:
            if isinstance(raw.get("all"), list):
                return cls.all_of(raw["all"])
            if isinstance(raw.get("any"), list):
                return cls.any_of(raw["any"])
        raise ValueError(
            "depends_on must be 'question:value', {all = [...]}, or {any = [...]}"
        )

    def referenced_questions(self) -> list[str]:
        """Identifiers of every question this dependency looks at, in order."""
        return [p.question for p in self.predicates]


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------

_CHOICE_TYPES = (QuestionType.SELECT, QuestionType.MULTI_SELECT)


class Question(BaseModel):
    """A single question definition.  Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Unique identifier within the blueprint")
    type: QuestionType
    help: str = Field(default="")
    choices: Optional[list[str]] = Field(default=None)
    depends_on: Optional[Dependency] = Field(default=None)

    @field_validator("depends_on", mode="before")
    @classmethod
    def _parse_dependency(cls, value: Any) -> Any:
        if value is None:
            return None
        return Dependency.from_raw(value)

    @model_validator(mode="after")
    def _choices_for_selects(self) -> "Question":
        if self.type in _CHOICE_TYPES and not self.choices:
            raise ValueError(f"question '{self.id}' of type {self.type.value} requires choices")
        return self


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_questions(data: dict[str, Any]) -> list[Question]:
    """Validate a decoded question table, keeping declaration order."""
    questions: list[Question] = []
    for question_id, definition in data.items():
        if not isinstance(definition, dict):
            raise ValueError(f"question '{question_id}' must be a table")
        questions.append(Question(id=question_id, **definition))
    return questions


def load_questions(path: str | Path) -> list[Question]:
    """Load and validate a blueprint's question file.

    Raises:
        FileOperationError: If the file cannot be read.
        ParseError: If the file is not valid TOML or a question is malformed.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(FileOperation.READ, file_path, exc) from exc

    try:
        return parse_questions(tomllib.loads(raw))
    except (tomllib.TOMLDecodeError, ValidationError, ValueError, TypeError) as exc:
        raise ParseError(FileFormat.TOML, file_path, exc) from exc
