from .task_parser import (
    MARKDOWN_SUFFIXES,
    parse_file,
    parse_tasks,
    parse_tasks_all_dates,
    read_lines,
)

__all__ = [
    "parse_tasks",
    "parse_tasks_all_dates",
    "parse_file",
    "read_lines",
    "MARKDOWN_SUFFIXES",
]
