"""
Rendering of per-file task groups.

render_html() builds the "today's tasks" page; render_text() is the plain
terminal equivalent used by the CLI. Both take the FileTaskGroup list
produced by the workspace cache.
"""

from typing import List

from daily_tasks.models.task import FileTaskGroup

CHECKED = "☑"
UNCHECKED = "☐"

_PAGE_STYLE = """\
  body { font-family: sans-serif; padding: 12px; }
  h1 { font-size: 1.4em; }
  h2 { font-size: 1.1em; margin-top: 1.2em; }
  ul { list-style: none; padding-left: 0; }
  li { margin-bottom: 8px; }
  .task-link { cursor: pointer; text-decoration: underline; }
  .log { margin-left: 24px; opacity: 0.8; }"""


def escape_html(text: str) -> str:
    """Escape the characters that matter inside element text and attributes."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _checkbox(is_completed: bool) -> str:
    return CHECKED if is_completed else UNCHECKED


def _render_groups_html(groups: List[FileTaskGroup]) -> str:
    parts: List[str] = []
    for group in groups:
        parts.append(f"<h2>{escape_html(group.file_name)}</h2>")
        parts.append("<ul>")
        path_attr = escape_html(str(group.file_path))
        for task in group.tasks:
            parts.append(
                f'<li>{_checkbox(task.is_completed)} '
                f'<a href="#" class="task-link" data-path="{path_attr}" data-line="{task.line}">'
                f"{escape_html(task.text)}</a>"
            )
            parts.append(f'  <br><span class="log">{escape_html(task.log)}</span></li>')
        parts.append("</ul>")
    return "\n".join(parts)


def _render_empty_html(date: str) -> str:
    safe_date = escape_html(date)
    return (
        f"<p>No tasks with a log line for {safe_date} were found.</p>\n"
        f"<p>Add a line such as &quot;- {safe_date}: what you did&quot; under a task.</p>"
    )


def render_html(groups: List[FileTaskGroup], date: str) -> str:
    """Render a complete HTML page listing each file's tasks for ``date``."""
    body = _render_groups_html(groups) if groups else _render_empty_html(date)
    safe_date = escape_html(date)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="UTF-8">\n'
        f"<title>Tasks for {safe_date}</title>\n"
        f"<style>\n{_PAGE_STYLE}\n</style>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>Tasks for {safe_date}</h1>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def render_text(groups: List[FileTaskGroup], date: str) -> str:
    """Render groups as indented plain text."""
    if not groups:
        return f"No tasks with a log line for {date}.\n"

    lines: List[str] = [f"Tasks for {date}", ""]
    for group in groups:
        lines.append(f"{group.file_name}  ({group.file_path})")
        for task in group.tasks:
            lines.append(f"  {_checkbox(task.is_completed)} {task.text}  [line {task.line + 1}]")
            if task.log:
                lines.append(f"      {task.log}")
        lines.append("")
    return "\n".join(lines)
