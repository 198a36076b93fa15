"""
Task and log record models.

A TaskMarker is the parser's "current task" slot: the most recent task line
seen while scanning. TaskLog and DatedTaskLog are the records handed back to
the host; their to_dict() output uses the camelCase field names the host
expects (isCompleted, text, line, log, date).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class TaskMarker:
    """A recognised task line (``- [ ] text`` or ``- [x] text``)."""

    indent: int
    completed: bool
    text: str
    line: int

    def owns(self, date_indent: int) -> bool:
        """True if a date line at ``date_indent`` belongs to this task."""
        return date_indent > self.indent


@dataclass(frozen=True)
class TaskLog:
    """A log entry for the requested date, tagged with its owning task."""

    is_completed: bool
    text: str
    line: int
    log: str

    @classmethod
    def from_marker(cls, marker: TaskMarker, log: str) -> TaskLog:
        return cls(
            is_completed=marker.completed,
            text=marker.text,
            line=marker.line,
            log=log,
        )

    def to_dict(self) -> dict:
        return {
            "isCompleted": self.is_completed,
            "text": self.text,
            "line": self.line,
            "log": self.log,
        }


@dataclass(frozen=True)
class DatedTaskLog:
    """
    A log entry of any date, tagged with its owning task.

    Placeholders stand in for tasks that have no log entry at all; they carry
    empty ``log`` and ``date`` strings.
    """

    is_completed: bool
    text: str
    line: int
    log: str = ""
    date: str = ""

    @classmethod
    def from_marker(cls, marker: TaskMarker, log: str = "", date: str = "") -> DatedTaskLog:
        return cls(
            is_completed=marker.completed,
            text=marker.text,
            line=marker.line,
            log=log,
            date=date,
        )

    @property
    def is_placeholder(self) -> bool:
        return not self.date

    def to_dict(self) -> dict:
        return {
            "isCompleted": self.is_completed,
            "text": self.text,
            "line": self.line,
            "log": self.log,
            "date": self.date,
        }


Record = Union[TaskLog, DatedTaskLog]


@dataclass
class FileTaskGroup:
    """Records parsed from a single markdown file in the workspace."""

    file_path: Path
    file_name: str
    tasks: List[Record] = field(default_factory=list)

    def to_dict(self) -> dict:
        tasks = []
        for task in self.tasks:
            d = task.to_dict()
            d["filePath"] = str(self.file_path)
            tasks.append(d)
        return {
            "fileName": self.file_name,
            "filePath": str(self.file_path),
            "tasks": tasks,
        }


@dataclass
class CachedFile:
    """A markdown file held in the workspace cache."""

    file_path: Path
    lines: List[str]
    mtime: float
