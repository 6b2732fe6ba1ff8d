"""stencil scaffolder -- renders a blueprint into a new project directory.

The blueprint tree is rendered into an in-memory ``VirtualFileSystem`` first
and only then applied to disk inside a ``Transaction``, so a failure part-way
through leaves nothing behind.

Quick usage::

    from stencil.scaffolder import BlueprintGenerator

    generator = BlueprintGenerator(source)
    result = generator.generate("python", "./my-project")
"""

from stencil.scaffolder.generator import ApplyOutcome, BlueprintGenerator, GenerationResult
from stencil.scaffolder.preview import build_tree, preview_as_tree
from stencil.scaffolder.templates import TemplateRenderer, build_context
from stencil.scaffolder.transaction import (
    RollbackKind,
    RollbackOperation,
    Transaction,
    TransactionState,
    apply_vfs,
)
from stencil.scaffolder.vfs import VirtualEntry, VirtualFileSystem, build_vfs, render_path_segments

__all__ = [
    "ApplyOutcome",
    "BlueprintGenerator",
    "GenerationResult",
    "TemplateRenderer",
    "build_context",
    "VirtualEntry",
    "VirtualFileSystem",
    "build_vfs",
    "render_path_segments",
    "RollbackKind",
    "RollbackOperation",
    "Transaction",
    "TransactionState",
    "apply_vfs",
    "build_tree",
    "preview_as_tree",
]
