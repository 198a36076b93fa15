"""Handler functions shared by MCP tools and REST API."""

import logging
from typing import Any, Optional

from daily_tasks.models.task import FileTaskGroup
from daily_tasks.parsers.task_parser import parse_tasks, parse_tasks_all_dates
from daily_tasks.utils.dates import is_date_token, today_str
from daily_tasks.utils.formatting import render_html
from daily_tasks.utils.marshal import (
    parse_tasks_all_dates_from_host,
    parse_tasks_from_host,
    records_to_dicts,
)

log = logging.getLogger(__name__)

# Error codes carried next to "error" so callers can tell failures apart
ERROR_INVALID_DATE = "invalid_date"
ERROR_NOT_FOUND = "not_found"


def _error(code: str, message: str) -> dict:
    return {"error": message, "code": code}


def _check_date(date: Optional[str]) -> tuple:
    """Return (date, error dict); a missing date means today."""
    if not date:
        return today_str(), None
    if not is_date_token(date):
        return date, _error(ERROR_INVALID_DATE, f"Invalid date '{date}': expected YYYY-MM-DD")
    return date, None


# ---------------------------------------------------------------------------
# Pure parsing (no cache)
# ---------------------------------------------------------------------------


def handle_parse_tasks(*, lines: Any, target_date: Any) -> list[dict]:
    return records_to_dicts(parse_tasks_from_host(lines, target_date))


def handle_parse_tasks_all_dates(*, lines: Any) -> list[dict]:
    return records_to_dicts(parse_tasks_all_dates_from_host(lines))


# ---------------------------------------------------------------------------
# Workspace queries
# ---------------------------------------------------------------------------


def handle_daily_tasks(cache, *, date: Optional[str] = None) -> dict:
    target, error = _check_date(date)
    if error:
        return error
    groups = cache.collect_tasks(target)
    log.debug("Found %d files with logs for %s", len(groups), target)
    return {"date": target, "files": [g.to_dict() for g in groups]}


def handle_daily_html(cache, *, date: Optional[str] = None) -> dict:
    target, error = _check_date(date)
    if error:
        return error
    return {"date": target, "html": render_html(cache.collect_tasks(target), target)}


def handle_task_logs(cache) -> list[dict]:
    return [g.to_dict() for g in cache.collect_all_dates()]


def handle_file_tasks(cache, *, file_path: str, date: Optional[str] = None) -> dict:
    if date:
        date, error = _check_date(date)
        if error:
            return error

    path = cache.resolve(file_path)
    if path is None:
        return _error(ERROR_NOT_FOUND, f"File '{file_path}' not found in workspace")

    lines = cache.get_lines(path) or []
    tasks = parse_tasks(lines, date) if date else parse_tasks_all_dates(lines)
    return FileTaskGroup(file_path=path, file_name=path.name, tasks=list(tasks)).to_dict()


def handle_cache_status(cache) -> dict:
    return cache.status()
