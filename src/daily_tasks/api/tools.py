"""MCP tool registration for daily-task-logger."""

import json
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from daily_tasks.api.handlers import (
    handle_cache_status,
    handle_daily_tasks,
    handle_file_tasks,
    handle_parse_tasks,
    handle_parse_tasks_all_dates,
    handle_task_logs,
)


def register_tools(mcp: FastMCP, cache) -> None:
    """Register all MCP tools onto the FastMCP instance."""

    # ------------------------------------------------------------------
    # Parsing tools
    # ------------------------------------------------------------------

    @mcp.tool()
    def parse_tasks(lines: Any, target_date: str) -> str:
        """
        Extract the log entries for one date from markdown task lines.

        A task is a line like "- [ ] text" or "- [x] text"; its log entries
        are lines like "- 2024-01-01: did something" indented deeper than
        the task.

        Args:
            lines: The document, one string per line (anything else is
                   treated as an empty document)
            target_date: Date to match exactly (YYYY-MM-DD)

        Returns:
            JSON array of {isCompleted, text, line, log}
        """
        return json.dumps(handle_parse_tasks(lines=lines, target_date=target_date), indent=2)

    @mcp.tool()
    def parse_tasks_all_dates(lines: Any) -> str:
        """
        Extract every log entry from markdown task lines.

        Tasks with no log entry at all are reported once with empty "log"
        and "date".

        Args:
            lines: The document, one string per line (anything else is
                   treated as an empty document)

        Returns:
            JSON array of {isCompleted, text, line, log, date}
        """
        return json.dumps(handle_parse_tasks_all_dates(lines=lines), indent=2)

    # ------------------------------------------------------------------
    # Workspace tools
    # ------------------------------------------------------------------

    @mcp.tool()
    def daily_tasks(date: Optional[str] = None) -> str:
        """
        List the tasks that have a log entry for a date, across every
        markdown file in the workspace.

        Args:
            date: YYYY-MM-DD; defaults to today (local time)

        Returns:
            JSON object {date, files: [{fileName, filePath, tasks}]}
        """
        return json.dumps(handle_daily_tasks(cache, date=date), indent=2)

    @mcp.tool()
    def task_logs() -> str:
        """
        List every task and log entry in the workspace, grouped by file.

        Returns:
            JSON array of {fileName, filePath, tasks}
        """
        return json.dumps(handle_task_logs(cache), indent=2)

    @mcp.tool()
    def file_tasks(file_path: str, date: Optional[str] = None) -> str:
        """
        Parse a single workspace file.

        Args:
            file_path: Path of the markdown file, absolute or relative to the
                       workspace root
            date: YYYY-MM-DD to return only that date's log entries; omit to
                  return every entry plus no-log placeholders

        Returns:
            JSON object {fileName, filePath, tasks}, or {error, code}
        """
        return json.dumps(handle_file_tasks(cache, file_path=file_path, date=date), indent=2)

    @mcp.tool()
    def cache_status() -> str:
        """
        Report workspace cache statistics.

        Returns:
            JSON object with files_indexed, lines_indexed, last_full_scan,
            workspace_root, exclude_dirs
        """
        return json.dumps(handle_cache_status(cache), indent=2)
