"""Unit tests for the tree preview (stencil.scaffolder.preview)."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from stencil.scaffolder.preview import build_tree, preview_as_tree
from stencil.scaffolder.vfs import VirtualEntry, VirtualFileSystem

pytestmark = pytest.mark.unit


def _labels(tree) -> list[str]:
    labels = [str(tree.label)]
    for child in tree.children:
        labels.extend(_labels(child))
    return labels


@pytest.fixture
def vfs() -> VirtualFileSystem:
    return VirtualFileSystem(
        [
            VirtualEntry(Path("src"), is_file=False),
            VirtualEntry(Path("src/main.py"), "print()\n", is_file=True),
            VirtualEntry(Path("docs/index.md"), "docs\n", is_file=True),
            VirtualEntry(None, "dead", is_file=True),
        ]
    )


class TestBuildTree:
    def test_root_is_destination_name(self, vfs):
        tree = build_tree(vfs, Path("/tmp/my-project"))
        assert "my-project" in str(tree.label)

    def test_colours_directories_and_files(self, vfs):
        labels = _labels(build_tree(vfs, "out"))
        assert "[blue]src[/blue]" in labels
        assert "[green]main.py[/green]" in labels

    def test_missing_parent_added_on_demand(self, vfs):
        tree = build_tree(vfs, "out")
        docs = [c for c in tree.children if "docs" in str(c.label)]
        assert len(docs) == 1
        assert [str(c.label) for c in docs[0].children] == ["[green]index.md[/green]"]

    def test_dead_entries_not_shown(self, vfs):
        assert not any("dead" in label for label in _labels(build_tree(vfs, "out")))

    def test_markup_in_names_is_escaped(self):
        vfs = VirtualFileSystem([VirtualEntry(Path("[bold]x.txt"), "", is_file=True)])
        labels = _labels(build_tree(vfs, "out"))
        assert "[green]\\[bold]x.txt[/green]" in labels


class TestPreviewAsTree:
    def test_prints_legend_and_entries(self, vfs):
        output = io.StringIO()
        preview_as_tree(vfs, "out", console=Console(file=output, force_terminal=False, width=120))
        text = output.getvalue()
        assert "Legend" in text
        assert "Preview" in text
        assert "main.py" in text
        assert "index.md" in text
