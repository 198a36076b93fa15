"""Extract checklist tasks and their dated log entries from markdown outlines."""

from .models import DatedTaskLog, FileTaskGroup, TaskLog
from .parsers import parse_file, parse_tasks, parse_tasks_all_dates
from .utils.marshal import decode_lines, parse_tasks_all_dates_from_host, parse_tasks_from_host

__version__ = "0.1.0"

__all__ = [
    "parse_tasks",
    "parse_tasks_all_dates",
    "parse_file",
    "parse_tasks_from_host",
    "parse_tasks_all_dates_from_host",
    "decode_lines",
    "TaskLog",
    "DatedTaskLog",
    "FileTaskGroup",
]
