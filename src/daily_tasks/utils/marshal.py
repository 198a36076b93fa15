"""
Host-boundary marshaling.

Hosts hand us whatever they have: a list of strings, a JSON string, or
something else entirely. decode_lines() turns that into a list of strings,
falling back to an empty list instead of raising, so the parser itself only
ever sees well-formed input.
"""

import json
import logging
from typing import Any, Iterable, List

from daily_tasks.models.task import DatedTaskLog, Record, TaskLog
from daily_tasks.parsers.task_parser import parse_tasks, parse_tasks_all_dates

log = logging.getLogger(__name__)


def decode_lines(value: Any) -> List[str]:
    """
    Interpret a host value as a sequence of lines.

    Accepts a list/tuple of strings or a JSON-encoded array of strings.
    Anything else decodes to [].
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            log.debug("Lines payload is not valid JSON; treating as empty")
            return []

    if not isinstance(value, (list, tuple)):
        log.debug("Lines payload of type %s is not a sequence; treating as empty", type(value).__name__)
        return []

    if not all(isinstance(item, str) for item in value):
        log.debug("Lines payload contains non-string items; treating as empty")
        return []

    return list(value)


def records_to_dicts(records: Iterable[Record]) -> List[dict]:
    """Serialize parser records to camelCase dicts."""
    return [record.to_dict() for record in records]


def parse_tasks_from_host(lines: Any, target_date: Any) -> List[TaskLog]:
    """parse_tasks with defensive decoding of both arguments."""
    if not isinstance(target_date, str):
        log.debug("Target date of type %s cannot match any log line", type(target_date).__name__)
        return []
    return parse_tasks(decode_lines(lines), target_date)


def parse_tasks_all_dates_from_host(lines: Any) -> List[DatedTaskLog]:
    """parse_tasks_all_dates with defensive decoding of the lines argument."""
    return parse_tasks_all_dates(decode_lines(lines))
