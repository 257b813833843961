from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..config.settings import load_settings
from ..local_analysis.git_repo import GitEnvironment, describe_environment
from ..logging_config import setup_logging
from ..scanner.errors import ScannerError
from ..scanner.generator import TodoGenerator
from ..scanner.walker import COMMON_EXCLUDED_DIRS
from .display import build_json_payload, render_issues_table, render_records_table, render_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todoscan",
        description="Collect TODO/FIXME comment blocks from a source tree as tasks.",
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        type=Path,
        help="Root directory to scan (default: current directory).",
    )
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        default=None,
        metavar="REGEX",
        help="Only scan files whose path matches this regex. Repeatable.",
    )
    parser.add_argument(
        "-x",
        "--exclude-dir",
        action="append",
        default=None,
        metavar="NAME",
        help="Do not descend into directories with this name. Repeatable.",
    )
    parser.add_argument(
        "--skip-common-dirs",
        action="store_true",
        help="Also skip VCS, virtualenv, editor and node_modules directories.",
    )
    parser.add_argument(
        "--min-words",
        type=int,
        default=None,
        help="Accept titles with at least this many words longer than 2 characters.",
    )
    parser.add_argument(
        "--min-chars",
        type=int,
        default=None,
        help="Accept titles with at least this many characters.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of files scanned concurrently.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the tasks as JSON instead of a formatted table.",
    )
    parser.add_argument(
        "--show-issues",
        action="store_true",
        help="Also list skipped comments and files that could not be read.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log scanning progress to stderr.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    err = Console(stderr=True)

    try:
        settings = load_settings(
            filters=args.include,
            excluded_dirs=args.exclude_dir,
            min_words=args.min_words,
            min_chars=args.min_chars,
            max_workers=args.workers,
            log_level="DEBUG" if args.verbose else None,
        )
    except ValidationError as exc:
        err.print(f"[bold red]Invalid settings:[/bold red] {escape(str(exc))}", highlight=False)
        return 1

    if args.skip_common_dirs:
        excluded = set(settings.excluded_dirs or ()) | COMMON_EXCLUDED_DIRS
        settings = settings.model_copy(update={"excluded_dirs": sorted(excluded)})

    setup_logging(settings.log_level)
    logger.debug(f"Scanning {args.root}")

    try:
        generator = TodoGenerator(args.root, settings.to_preferences())
        result = generator.generate()
    except ScannerError as exc:
        err.print(f"[bold red]Scan error ({exc.code}):[/bold red] {escape(str(exc))}", highlight=False)
        return 1

    environment = describe_environment(generator.root, GitEnvironment(generator.root))

    if args.json:
        print(json.dumps(build_json_payload(result, environment), indent=2, ensure_ascii=False))
        return 0

    console = Console()
    if result.records:
        console.print(render_records_table(result.sorted_records()), highlight=False)
    else:
        console.print("No tasks found.")
    if args.show_issues and result.issues:
        console.print(render_issues_table(result.issues), highlight=False)
    console.print(render_summary(result, environment), markup=False, highlight=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
