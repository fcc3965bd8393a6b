#!/usr/bin/env python3
"""
Commit-Helper CLI Interface

Commits every changed file in a git working tree on its own, with a commit
message generated from that file's diff or content.

Usage:
    commit-helper [options]

Options:
    -p, --path PATH      Repository path (default: current directory)
    -m, --model MODEL    AI model used to generate commit messages
    --no-color           Disable colored output
    -v, --verbose        Show tracebacks for unexpected errors
    --version            Show version information

Environment:
    OPENAI_API_KEY       API key for the text-generation service
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from commit_helper import __version__, utils
from commit_helper.config import Config
from commit_helper.errors import GitUnavailableError, RepositoryError
from commit_helper.generator import MessageGenerator
from commit_helper.processor import CommitProcessor
from commit_helper.repository import RepositoryInspector

ERROR_EXIT_CODE = 1
INTERRUPTED_EXIT_CODE = 130


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="commit-helper",
        description="Commit-Helper: one AI-described commit per changed file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="The API key is read from the OPENAI_API_KEY environment variable.",
    )

    parser.add_argument(
        "-p", "--path",
        type=str,
        default=".",
        help="Path to the Git repository (default: current directory)"
    )

    parser.add_argument(
        "-m", "--model",
        type=str,
        default=None,
        help="AI model to use for generating commit messages (default: gpt-4o-mini)"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show tracebacks for unexpected errors"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version information"
    )

    return parser


def validate_path(path: str) -> Optional[Path]:
    """Resolve the repository path, or return None if it is not a directory."""
    repo_path = Path(path).resolve()
    if not repo_path.is_dir():
        utils.error_console.print(f"[red]Error: Path does not exist: {escape(str(repo_path))}[/red]")
        return None
    return repo_path


def create_config_from_args(args: argparse.Namespace) -> Config:
    if args.model:
        return Config(model=args.model)
    return Config()


def fatal(message: str) -> int:
    utils.error_console.print(f"[red]Error: {escape(message)}[/red]")
    return ERROR_EXIT_CODE


def run(config: Config, inspector: Optional[RepositoryInspector] = None,
        processor: Optional[CommitProcessor] = None) -> int:
    """Classify the working tree and commit each file; return the exit code.

    Changes to the top of the working tree first, since git reports every
    path relative to it. The caller restores the working directory.
    """
    inspector = inspector or RepositoryInspector(config)

    try:
        inspector.ensure_available()
        root = inspector.toplevel()
    except GitUnavailableError as e:
        return fatal(str(e))
    except RepositoryError as e:
        return fatal(f"Not a git repository: {os.getcwd()} ({e})")

    os.chdir(root)

    try:
        classified = inspector.classify()
    except RepositoryError as e:
        return fatal(str(e))

    if classified.is_empty():
        utils.console.print("[yellow]No changes to commit.[/yellow]")
        return 0

    processor = processor or CommitProcessor(inspector, MessageGenerator(config))
    report = processor.process_all(classified)

    summary = f"Committed {len(report.committed)} file(s)"
    if report.failed:
        summary += f", [red]{len(report.failed)} failed[/red]"
    utils.console.print(f"[bold]{summary}[/bold]")
    return 0


def main_cli(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    utils.configure_consoles(no_color=args.no_color)

    repo_path = validate_path(args.path)
    if not repo_path:
        return ERROR_EXIT_CODE

    try:
        config = create_config_from_args(args)
    except ValueError as e:
        return fatal(str(e))

    original_cwd = os.getcwd()
    os.chdir(repo_path)

    try:
        return run(config)
    except KeyboardInterrupt:
        utils.error_console.print("\nOperation cancelled by user")
        return INTERRUPTED_EXIT_CODE
    except Exception as e:
        if args.verbose:
            raise
        return fatal(str(e))
    finally:
        os.chdir(original_cwd)


if __name__ == "__main__":
    sys.exit(main_cli())
