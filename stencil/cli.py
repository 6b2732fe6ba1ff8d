"""stencil command-line interface.

Usage::

    stencil copy gh:owner/blueprints python ./my-project
    stencil copy ./blueprints                  # pick template and destination interactively
    stencil list ./blueprints
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import tempfile

from rich.logging import RichHandler
from rich.markup import escape

from stencil.config import Config
from stencil.errors import PromptError, StencilError
from stencil.questions.prompts import Prompter, RichPrompter
from stencil.scaffolder.generator import BlueprintGenerator
from stencil.source import Source, resolve_source
from stencil.utils import console, print_error, print_success, print_summary_table, print_warning


def configure_logging(verbose: bool) -> None:
    """Route diagnostics through Rich; debug output only when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stencil",
        description="Scaffold a new project from a blueprint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stencil copy gh:owner/blueprints python ./my-project\n"
            "  stencil copy ./blueprints\n"
            "  stencil list ./blueprints\n"
        ),
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    copy = subparsers.add_parser("copy", help="Render a blueprint into a destination")
    copy.add_argument("source", help="Local directory or git reference where blueprints live")
    copy.add_argument("template", nargs="?", default=None, help="Blueprint name (prompted if omitted)")
    copy.add_argument(
        "destination",
        nargs="?",
        default=None,
        help="Directory where the project will be created (prompted if omitted)",
    )

    list_cmd = subparsers.add_parser("list", help="List the blueprints of a source")
    list_cmd.add_argument("source", help="Local directory or git reference where blueprints live")

    return parser


def select_blueprint(source: Source, prompter: Prompter) -> str:
    """Ask the user to pick one of the source's blueprints."""
    return prompter.select("Select template:", source.names())


def ask_destination(prompter: Prompter) -> str:
    return prompter.text("Destination")


def run_copy(args: argparse.Namespace, config: Config, prompter: Prompter) -> int:
    with tempfile.TemporaryDirectory(prefix="stencil-") as workdir:
        source = asyncio.run(resolve_source(args.source, workdir, config))
        template = args.template or select_blueprint(source, prompter)
        destination = args.destination or ask_destination(prompter)

        generator = BlueprintGenerator(source, config=config, prompter=prompter)
        result = generator.generate(template, destination)

    if result.committed:
        print_success(f"Created {len(result.created)} path(s) in {result.destination}")
    else:
        print_warning("No changes made.")
    return 0


def run_list(args: argparse.Namespace, config: Config) -> int:
    with tempfile.TemporaryDirectory(prefix="stencil-") as workdir:
        source = asyncio.run(resolve_source(args.source, workdir, config))
    print_summary_table(
        {name: info.path for name, info in source.blueprints.items()},
        title="Blueprints",
    )
    return 0


def main(argv: list[str] | None = None, prompter: Prompter | None = None) -> int:
    """CLI entry point for ``stencil``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.verbose:
        config = config.model_copy(update={"verbose": True})
    configure_logging(config.verbose)

    prompter = prompter or RichPrompter(console)
    try:
        if args.command == "copy":
            return run_copy(args, config, prompter)
        return run_list(args, config)
    except PromptError as exc:
        print_error(f"Aborted: {escape(str(exc))}")
        return 1
    except StencilError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
