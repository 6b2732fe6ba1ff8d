"""Jinja2 template rendering for blueprint scaffolding.

Provides the TemplateRenderer class which renders path segments and file
contents of a blueprint with the answers collected from the user.  The
environment is rooted at the blueprint directory so templates can
``{% include %}`` or ``{% extends %}`` sibling blueprint files.

Output is never HTML-escaped: answers land in paths and files exactly as
typed.  Confirm answers are Python bools and print as ``True``/``False``;
use ``{{ flag | lower }}`` where ``true``/``false`` is wanted.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    Undefined,
)

from stencil.errors import RenderError
from stencil.questions.models import Answer


# ---------------------------------------------------------------------------
# Undefined handling
# ---------------------------------------------------------------------------

class ConditionalUndefined(StrictUndefined):
    """Undefined value for answers that were never asked.

    Tests and comparisons treat it as falsy, so ``{% if skipped %}`` simply
    takes the false branch, while printing or iterating it is still an error.
    """

    __slots__ = ()
    __bool__ = Undefined.__bool__
    __eq__ = Undefined.__eq__
    __ne__ = Undefined.__ne__
    __hash__ = Undefined.__hash__


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------

def build_context(answers: dict[str, Answer]) -> dict[str, Any]:
    """Convert collected answers into the template context.

    Strings, bools, and string lists are exposed under their question id.
    Lists are copied so templates never alias the answer map.
    """
    context: dict[str, Any] = {}
    for key, answer in answers.items():
        context[key] = list(answer) if isinstance(answer, list) else answer
    return context


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------

class TemplateRenderer:
    """Renders blueprint templates with the collected answers."""

    def __init__(self, template_dir: str | Path, context: dict[str, Any]) -> None:
        self.template_dir = Path(template_dir)
        self.context = context
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=ConditionalUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    def render_string(self, template_string: str, name: str | None = None) -> str:
        """Render an inline template string with the renderer's context.

        Raises:
            RenderError: On a syntax error or a failure while rendering.
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(self.context)
        except TemplateError as exc:
            raise RenderError(self.context, exc, template=name or template_string) from exc

    def render_segment(self, segment: str) -> str:
        """Render one path component, stripped of surrounding whitespace."""
        return self.render_string(segment).strip()


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
