"""
Parser for task lists with per-date log lines.

A task is a checkbox bullet; its log lines are date-stamped bullets indented
deeper than the task:

    - [ ] Buy milk
      - 2024-01-01: bought oat milk
    - [x] Clean house

Main API:
    parse_tasks(lines, target_date)   → List[TaskLog]
    parse_tasks_all_dates(lines)      → List[DatedTaskLog]
    parse_file(path, target_date)     → either of the above

Both modes scan once, top to bottom, keeping only the most recent task line
as state. Tasks never nest: a new task line always replaces the current one,
whatever its indent. Lines that match neither pattern are skipped; nothing
here raises on malformed text.
"""

import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from daily_tasks.models.task import DatedTaskLog, TaskLog, TaskMarker

# File suffixes recognised as markdown (case-insensitive)
MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})

TASK_RE = re.compile(r"^(\s*)-\s*\[([ x])\]\s*(.*)")
DATE_RE = re.compile(r"^(\s*)-\s*([0-9]{4}-[0-9]{2}-[0-9]{2}):\s*(.*)")

# Line terminators as editors count them (not str.splitlines(), which also breaks on \f, \v, \u2028)
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


# ---------------------------------------------------------------------------
# Line recognition
# ---------------------------------------------------------------------------

def _match_task(line: str, line_num: int) -> Optional[TaskMarker]:
    """Return a TaskMarker or None if line is not a task."""
    m = TASK_RE.match(line)
    if not m:
        return None
    return TaskMarker(
        indent=len(m.group(1)),
        completed=m.group(2) == "x",
        text=m.group(3),
        line=line_num,
    )


def _match_date(line: str) -> Optional[Tuple[int, str, str]]:
    """Return (indent, date, log) or None if line is not a date-log line."""
    m = DATE_RE.match(line)
    if not m:
        return None
    return len(m.group(1)), m.group(2), m.group(3)


def _scan(lines: Sequence[str]) -> Iterator[Tuple[Optional[TaskMarker], Optional[Tuple[int, str, str]]]]:
    """
    Yield (task, None) for every task line and (current_task, date_match) for
    every date-log line that belongs to the current task.

    Date lines seen before any task, or not indented past the current task,
    are dropped here; they never reset the current task.
    """
    current: Optional[TaskMarker] = None

    for line_num, line in enumerate(lines):
        task = _match_task(line, line_num)
        if task is not None:
            current = task
            yield task, None
            continue

        date_match = _match_date(line)
        if date_match and current is not None and current.owns(date_match[0]):
            yield current, date_match


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_tasks(lines: Sequence[str], target_date: str) -> List[TaskLog]:
    """
    Collect the log entries dated ``target_date``.

    The date is compared as a plain string; no normalisation happens. A task
    with several matching log lines yields one record per line. Tasks with no
    matching log produce nothing.
    """
    records: List[TaskLog] = []
    for task, date_match in _scan(lines):
        if date_match is None:
            continue
        _, date, log = date_match
        if date == target_date:
            records.append(TaskLog.from_marker(task, log))
    return records


def parse_tasks_all_dates(lines: Sequence[str]) -> List[DatedTaskLog]:
    """
    Collect every log entry, whatever its date.

    A task with no log entry is reported once as a placeholder record (empty
    ``log`` and ``date``). The placeholder is emitted when the next task line
    supersedes it, or at end of input, so it lands after any records that
    were emitted in between.
    """
    records: List[DatedTaskLog] = []
    current: Optional[TaskMarker] = None
    has_log = False

    for task, date_match in _scan(lines):
        if date_match is None:
            if current is not None and not has_log:
                records.append(DatedTaskLog.from_marker(current))
            current = task
            has_log = False
            continue

        _, date, log = date_match
        records.append(DatedTaskLog.from_marker(task, log=log, date=date))
        has_log = True

    if current is not None and not has_log:
        records.append(DatedTaskLog.from_marker(current))

    return records


def read_lines(file_path: Path) -> List[str]:
    """Read a markdown file as a list of lines (no line terminators)."""
    text = file_path.read_text(encoding="utf-8", errors="replace")
    lines = LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_file(file_path: Path, target_date: Optional[str] = None):
    """
    Parse a markdown file.

    With ``target_date`` this runs parse_tasks; without it, parse_tasks_all_dates.
    """
    lines = read_lines(file_path)
    if target_date is None:
        return parse_tasks_all_dates(lines)
    return parse_tasks(lines, target_date)
