"""
daily-tasks - command-line access to task log entries

Usage:
    daily-tasks parse <file> [--date YYYY-MM-DD | --all] [--json]
    daily-tasks today [--root DIR] [--date YYYY-MM-DD] [--exclude a,b] [--format text|json|html]
    daily-tasks logs [--root DIR] [--exclude a,b]

Examples:
    daily-tasks parse notes/project.md --date 2024-01-01
    daily-tasks parse notes/project.md --all --json
    daily-tasks today --root ~/notes
    daily-tasks today --root ~/notes --format html > today.html
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from daily_tasks.cache.workspace_cache import (
    DEFAULT_EXCLUDE_DIRS,
    WorkspaceCache,
    parse_exclude_dirs,
)
from daily_tasks.parsers.task_parser import parse_file
from daily_tasks.utils.dates import is_date_token, today_str
from daily_tasks.utils.formatting import render_html, render_text
from daily_tasks.utils.marshal import records_to_dicts

log = logging.getLogger(__name__)


# --- helpers ---

def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_cache(args) -> WorkspaceCache:
    root = Path(args.root).expanduser()
    if not root.is_dir():
        _fail(f"Workspace directory not found: {root}")
    exclude_dirs = DEFAULT_EXCLUDE_DIRS if args.exclude is None else parse_exclude_dirs(args.exclude)
    log.debug("Scanning %s, excluding %s", root, sorted(exclude_dirs))
    cache = WorkspaceCache()
    cache.initialize(root, set(exclude_dirs))
    return cache


def _check_date(date) -> str:
    if date is None:
        return today_str()
    if not is_date_token(date):
        _fail(f"Invalid date '{date}': expected YYYY-MM-DD")
    return date


# --- commands ---

def parse_cmd(args):
    """Print the log entries of a single file."""
    file_path = Path(args.file)
    if not file_path.is_file():
        _fail(f"File not found: {file_path}")

    if args.all:
        records = parse_file(file_path)
    else:
        records = parse_file(file_path, _check_date(args.date))

    if args.json:
        print(json.dumps(records_to_dicts(records), indent=2, ensure_ascii=False))
        return

    if not records:
        print("No log entries found.")
        return
    for record in records:
        checkbox = "[x]" if record.is_completed else "[ ]"
        date = getattr(record, "date", None)
        prefix = f"{date}  " if date else ""
        suffix = f": {record.log}" if record.log else ""
        print(f"{record.line + 1:>5}  {prefix}{checkbox} {record.text}{suffix}")


def today_cmd(args):
    """Print the tasks with a log entry for a date across the workspace."""
    date = _check_date(args.date)
    groups = _load_cache(args).collect_tasks(date)

    if args.format == "json":
        print(json.dumps(
            {"date": date, "files": [g.to_dict() for g in groups]},
            indent=2,
            ensure_ascii=False,
        ))
    elif args.format == "html":
        sys.stdout.write(render_html(groups, date))
    else:
        sys.stdout.write(render_text(groups, date))


def logs_cmd(args):
    """Print every log entry in the workspace as JSON."""
    groups = _load_cache(args).collect_all_dates()
    print(json.dumps([g.to_dict() for g in groups], indent=2, ensure_ascii=False))


# --- main ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daily-tasks",
        description="Extract dated log entries from markdown task lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # --- parse ---
    parse_p = subparsers.add_parser("parse", help="Parse a single markdown file")
    parse_p.add_argument("file", help="Markdown file to parse")
    mode = parse_p.add_mutually_exclusive_group()
    mode.add_argument("--date", help="Date to report (YYYY-MM-DD, default today)")
    mode.add_argument("--all", action="store_true", help="Report every date, plus tasks without logs")
    parse_p.add_argument("--json", action="store_true", help="Print JSON records")
    parse_p.set_defaults(func=parse_cmd)

    # --- today ---
    today_p = subparsers.add_parser("today", help="Tasks logged on a date across a workspace")
    today_p.add_argument("--root", default=".", help="Workspace root directory")
    today_p.add_argument("--date", help="Date to report (YYYY-MM-DD, default today)")
    today_p.add_argument("--exclude", help="Comma-separated directory names to skip")
    today_p.add_argument("--format", choices=["text", "json", "html"], default="text",
                         help="Output format")
    today_p.set_defaults(func=today_cmd)

    # --- logs ---
    logs_p = subparsers.add_parser("logs", help="Every log entry across a workspace (JSON)")
    logs_p.add_argument("--root", default=".", help="Workspace root directory")
    logs_p.add_argument("--exclude", help="Comma-separated directory names to skip")
    logs_p.set_defaults(func=logs_cmd)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
