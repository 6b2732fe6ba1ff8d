"""In-memory staging of a rendered blueprint.

``build_vfs`` walks a blueprint directory and renders every path component
as a template.  A component that renders empty drops the entry and, for a
directory, its entire subtree -- that is how blueprints express conditional
files and folders::

    {% if use_docker %}docker{% endif %}/Dockerfile.j2

Files whose rendered name carries the template marker (``.j2`` by default)
have their content rendered and the marker stripped; every other file is
copied byte-for-byte.  Nothing touches the destination until the whole tree
has been staged successfully.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from stencil.errors import (
    FileOperation,
    FileOperationError,
    PathEncodingError,
    RenderError,
)
from stencil.scaffolder.templates import TemplateRenderer

logger = logging.getLogger(__name__)


@dataclass
class VirtualEntry:
    """A file or directory staged for creation.

    An entry without a ``destination`` is dead and never materialised.
    """

    destination: Path | None
    content: str | bytes | None = None
    is_file: bool = False

    @property
    def data(self) -> bytes:
        """File content encoded for writing."""
        if self.content is None:
            return b""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


@dataclass
class VirtualFileSystem:
    """Staged entries in traversal order."""

    entries: list[VirtualEntry] = field(default_factory=list)

    def add(self, entry: VirtualEntry) -> None:
        self.entries.append(entry)

    def directories(self) -> list[VirtualEntry]:
        """Live directory entries."""
        return [e for e in self.entries if not e.is_file and e.destination is not None]

    def files(self) -> list[VirtualEntry]:
        """Live file entries."""
        return [e for e in self.entries if e.is_file and e.destination is not None]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Path rendering
# ---------------------------------------------------------------------------

def render_path_segments(path: PurePath, renderer: TemplateRenderer) -> Path | None:
    """Render each component of *path* independently.

    For example ``["{% if tests %}tests{% endif %}", "{{ project }}.py"]``
    with ``tests=false`` returns ``None``.

    Returns:
        The rendered relative path, or ``None`` if ANY component renders to
        an empty or whitespace-only string.

    Raises:
        PathEncodingError: If a component is not valid text.
        RenderError: If a component fails to render or the rendered path
            would leave the destination root.
    """
    result = Path()
    for segment in path.parts:
        try:
            segment.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise PathEncodingError(path) from exc

        rendered = renderer.render_segment(segment)
        if not rendered:
            return None
        result = result / rendered

    if result.is_absolute() or ".." in result.parts:
        raise RenderError(
            renderer.context,
            ValueError(f"rendered path '{result}' escapes the destination"),
            template=str(path),
        )
    return result


# ---------------------------------------------------------------------------
# Tree building
# ---------------------------------------------------------------------------

def build_vfs(
    blueprint_dir: str | Path,
    renderer: TemplateRenderer,
    *,
    template_suffix: str = ".j2",
    questions_file: str = "blueprint.toml",
) -> VirtualFileSystem:
    """Walk *blueprint_dir* and stage every directory and file it produces.

    Raises:
        FileOperationError: If the tree cannot be walked or a file cannot be read.
        PathEncodingError: If a path component is not valid text.
        RenderError: If a path component or a template file fails to render.
    """
    root = Path(blueprint_dir)
    vfs = VirtualFileSystem()

    def _walk_error(error: OSError) -> None:
        raise FileOperationError(FileOperation.READ, error.filename or root, error) from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error):
        dirnames.sort()
        filenames.sort()
        relative_dir = Path(dirpath).relative_to(root)

        kept: list[str] = []
        for name in dirnames:
            destination = render_path_segments(relative_dir / name, renderer)
            if destination is None:
                logger.debug("Eliding directory %s", relative_dir / name)
                continue
            vfs.add(VirtualEntry(destination=destination, is_file=False))
            kept.append(name)
        # Elided directories are not descended into.
        dirnames[:] = kept

        for name in filenames:
            if name == questions_file:
                continue
            relative = relative_dir / name
            destination = render_path_segments(relative, renderer)
            if destination is None:
                logger.debug("Eliding file %s", relative)
                continue
            vfs.add(_stage_file(Path(dirpath) / name, relative, destination, renderer, template_suffix))

    logger.debug("Staged %d entries from %s", len(vfs), root)
    return vfs


def _stage_file(
    source: Path,
    relative: Path,
    destination: Path,
    renderer: TemplateRenderer,
    suffix: str,
) -> VirtualEntry:
    try:
        raw = source.read_bytes()
    except OSError as exc:
        raise FileOperationError(FileOperation.READ, source, exc) from exc

    if destination.suffix != suffix:
        return VirtualEntry(destination=destination, content=raw, is_file=True)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileOperationError(FileOperation.READ, source, exc) from exc

    rendered = renderer.render_string(text, name=str(relative))
    return VirtualEntry(destination=destination.with_suffix(""), content=rendered, is_file=True)
