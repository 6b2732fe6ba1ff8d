"""Tree preview of a staged blueprint."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from stencil.scaffolder.vfs import VirtualFileSystem
from stencil.utils import console as default_console


def build_tree(vfs: VirtualFileSystem, destination: str | Path) -> Tree:
    """Build a Rich tree of *vfs* rooted at *destination*.

    Directories are blue, files green.  Parents that were not staged as
    directory entries are added on demand.
    """
    destination = Path(destination)
    root = Tree(f"[bold blue]{escape(destination.name or str(destination))}[/bold blue]")
    nodes: dict[Path, Tree] = {Path(): root}

    def _node_for(directory: Path) -> Tree:
        if directory not in nodes:
            parent = _node_for(directory.parent)
            nodes[directory] = parent.add(f"[blue]{escape(directory.name)}[/blue]")
        return nodes[directory]

    for entry in vfs.directories():
        _node_for(entry.destination)
    for entry in vfs.files():
        parent = _node_for(entry.destination.parent)
        parent.add(f"[green]{escape(entry.destination.name)}[/green]")

    return root


def preview_as_tree(
    vfs: VirtualFileSystem,
    destination: str | Path,
    console: Console | None = None,
) -> None:
    """Print the staged tree with a legend."""
    console = console or default_console
    console.print("Legend: [blue]blue[/blue] = directory, [green]green[/green] = file")
    console.print()
    console.print("[bold bright_blue]Preview[/bold bright_blue]")
    console.print(build_tree(vfs, destination))
    console.print()
