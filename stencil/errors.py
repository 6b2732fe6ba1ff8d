"""Error taxonomy for the stencil scaffolder.

Every failure raised by the core derives from :class:`StencilError` so the CLI
can report it uniformly.  Each error keeps the structured data needed to
diagnose the failure (path, operation, edges, context) as attributes, and the
underlying exception is chained with ``raise ... from``.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any


class StencilError(Exception):
    """Base class for all scaffolder errors."""


# ---------------------------------------------------------------------------
# I/O and parsing
# ---------------------------------------------------------------------------


class FileOperation(str, Enum):
    """The file-system operation that failed."""
    READ = "reading a file"
    WRITE = "writing a file"
    MKDIR = "creating a directory"


class FileOperationError(StencilError):
    """Raised when reading, writing, or creating a directory fails."""

    def __init__(self, operation: FileOperation, path: str | Path, cause: Exception) -> None:
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"I/O error: {operation.value} on path '{self.path}': {cause}")


class FileFormat(str, Enum):
    """Structured file formats the scaffolder parses."""
    TOML = "toml"


class ParseError(StencilError):
    """Raised when a structured file cannot be parsed or validated."""

    def __init__(self, file_format: FileFormat, path: str | Path, cause: Exception) -> None:
        self.file_format = file_format
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Parsing error: {file_format.value} on '{self.path}': {cause}")


class PathEncodingError(StencilError):
    """Raised when a path cannot be represented as valid text."""

    def __init__(self, path: str | Path) -> None:
        self.path = path
        super().__init__(f"Path is not valid UTF-8 text: {path!r}")


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


class CycleDetectedError(StencilError):
    """Raised when the question dependency graph contains a cycle.

    Carries the *full* edge list of the graph, not only the edges that form
    the cycle.
    """

    def __init__(self, edges: list[tuple[str, str]]) -> None:
        self.edges = list(edges)
        super().__init__(_format_cycle(self.edges))


def _format_cycle(edges: list[tuple[str, str]]) -> str:
    nodes = sorted({node for edge in edges for node in edge})
    lines = ["Cycle detected in the following DAG:", "Nodes:", " ".join(nodes), "", "Edges:"]
    lines.extend(f"  {src} -> {dest}" for src, dest in edges)
    return "\n".join(lines)


class PromptError(StencilError):
    """Raised when the prompt collaborator fails or the user cancels."""

    def __init__(self, question: str, cause: BaseException | None = None) -> None:
        self.question = question
        self.cause = cause
        reason = "cancelled by user" if cause is None or isinstance(
            cause, (KeyboardInterrupt, EOFError)
        ) else str(cause)
        super().__init__(f"Prompt failed for '{question}': {reason}")


# ---------------------------------------------------------------------------
# Rendering and lookup
# ---------------------------------------------------------------------------


class RenderError(StencilError):
    """Raised when the template engine fails to parse or render a template."""

    def __init__(
        self,
        context: dict[str, Any],
        cause: Exception,
        template: str | None = None,
    ) -> None:
        self.context = dict(context)
        self.cause = cause
        self.template = template
        where = f" in '{template}'" if template else ""
        super().__init__(f"Error rendering template{where}: {cause}")


class BlueprintNotFoundError(StencilError):
    """Raised when a requested blueprint name is not in the registry."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = list(available or [])
        hint = f" (available: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Blueprint not found with name: {name}{hint}")


class SourceError(StencilError):
    """Raised when a blueprint source reference cannot be resolved."""

    def __init__(self, reference: str, detail: str) -> None:
        self.reference = reference
        self.detail = detail
        super().__init__(f"Unable to resolve source '{reference}': {detail}")


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class TransactionError(StencilError):
    """Raised when a finalized transaction is used again."""
