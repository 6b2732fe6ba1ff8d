"""Unit tests for utility functions (stencil.utils).

Tests cover:
- run_command (success, failure, timeout, cwd)
- normalize_path
- Rich output helpers (print_summary_table, print_created, etc.)
"""

from __future__ import annotations

import sys
from pathlib import Path, PurePosixPath
from unittest.mock import patch

import pytest

from stencil.utils import (
    normalize_path,
    print_created,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        )
        assert returncode == 3
        assert stderr == "bad"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        (tmp_path / "marker.txt").write_text("x")
        returncode, stdout, _ = await run_command(["ls"], cwd=tmp_path)
        assert returncode == 0
        assert "marker.txt" in stdout

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"],
            timeout=1,
        )
        assert returncode == -1
        assert "timed out" in stderr


# ---------------------------------------------------------------------------
# normalize_path
# ---------------------------------------------------------------------------


class TestNormalizePath:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("python", "python"),
            ("./python", "python"),
            ("templates/../python", "python"),
            ("a/./b/../c", "a/c"),
            ("../../escape", "escape"),
            ("../..", "."),
            ("", "."),
            ("/abs/path", "abs/path"),
        ],
    )
    def test_lexical_normalisation(self, raw, expected):
        assert normalize_path(raw) == Path(expected)

    @pytest.mark.unit
    def test_accepts_pure_paths(self):
        assert normalize_path(PurePosixPath("x/../y")) == Path("y")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_print_summary_table(self):
        with patch("stencil.utils.console") as mock_console:
            print_summary_table({"python": "./python"}, title="Blueprints")
        assert mock_console.print.call_count == 2
        table = mock_console.print.call_args_list[0].args[0]
        assert table.title == "Blueprints"
        assert table.row_count == 1

    @pytest.mark.unit
    def test_print_created_escapes_markup(self):
        with patch("stencil.utils.console") as mock_console:
            print_created(Path("out/[bold]x"))
        message = mock_console.print.call_args.args[0]
        assert message.startswith("[green]create[/green] ")
        assert "\\[bold]x" in message

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "helper, colour",
        [(print_success, "green"), (print_error, "red"), (print_warning, "yellow")],
    )
    def test_status_helpers(self, helper, colour):
        with patch("stencil.utils.console") as mock_console:
            helper("done")
        assert mock_console.print.call_args.args[0] == f"[bold {colour}]done[/bold {colour}]"
