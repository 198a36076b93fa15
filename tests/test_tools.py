"""
Tests for api/tools.py.

Uses a real WorkspaceCache backed by a temporary workspace on disk.
Exercises the MCP tool functions directly (bypasses transport).
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from daily_tasks.api.tools import register_tools
from daily_tasks.cache.workspace_cache import WorkspaceCache


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    (ws / "projects").mkdir(parents=True)
    (ws / "projects" / "alpha.md").write_text(
        "## Alpha\n"
        "- [x] Kickoff\n"
        "  - 2024-02-01: met the team\n"
        "- [ ] Design\n",
        encoding="utf-8",
    )
    return ws


class _FakeMCP:
    """Minimal fake to capture tool registrations."""

    def __init__(self):
        self._tools = {}

    def tool(self, *args, **kwargs):
        """Decorator that records functions by name."""
        def decorator(fn):
            self._tools[fn.__name__] = fn
            return fn
        return decorator

    def get(self, name: str):
        return self._tools[name]


@pytest.fixture
def setup(tmp_path):
    ws = _make_workspace(tmp_path)
    cache = WorkspaceCache()
    cache.initialize(ws, set())

    mcp = _FakeMCP()
    register_tools(mcp, cache)

    return mcp, cache, ws


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def test_all_tools_registered(setup):
    mcp, _, _ = setup
    assert set(mcp._tools) == {
        "parse_tasks",
        "parse_tasks_all_dates",
        "daily_tasks",
        "task_logs",
        "file_tasks",
        "cache_status",
    }


# ---------------------------------------------------------------------------
# Parsing tools
# ---------------------------------------------------------------------------

class TestParseTools:
    def test_parse_tasks(self, setup):
        mcp, _, _ = setup
        lines = ["- [ ] A", "  - 2024-01-01: one", "  - 2024-01-02: two"]
        result = json.loads(mcp.get("parse_tasks")(lines=lines, target_date="2024-01-02"))
        assert result == [{"isCompleted": False, "text": "A", "line": 0, "log": "two"}]

    def test_parse_tasks_all_dates(self, setup):
        mcp, _, _ = setup
        result = json.loads(mcp.get("parse_tasks_all_dates")(lines=["- [x] Only"]))
        assert result == [{"isCompleted": True, "text": "Only", "line": 0, "log": "", "date": ""}]

    def test_parse_tasks_malformed_lines(self, setup):
        mcp, _, _ = setup
        assert json.loads(mcp.get("parse_tasks")(lines=None, target_date="2024-01-01")) == []


# ---------------------------------------------------------------------------
# Workspace tools
# ---------------------------------------------------------------------------

class TestWorkspaceTools:
    def test_daily_tasks(self, setup):
        mcp, _, ws = setup
        result = json.loads(mcp.get("daily_tasks")(date="2024-02-01"))
        assert result["date"] == "2024-02-01"
        assert result["files"][0]["filePath"] == str(ws / "projects" / "alpha.md")
        assert result["files"][0]["tasks"][0]["text"] == "Kickoff"

    def test_daily_tasks_invalid_date(self, setup):
        mcp, _, _ = setup
        result = json.loads(mcp.get("daily_tasks")(date="Feb 1"))
        assert result["code"] == "invalid_date"

    def test_task_logs(self, setup):
        mcp, _, _ = setup
        result = json.loads(mcp.get("task_logs")())
        assert [(t["text"], t["date"]) for t in result[0]["tasks"]] == [
            ("Kickoff", "2024-02-01"),
            ("Design", ""),
        ]

    def test_file_tasks(self, setup):
        mcp, _, _ = setup
        result = json.loads(mcp.get("file_tasks")(file_path="projects/alpha.md", date="2024-02-01"))
        assert result["fileName"] == "alpha.md"
        assert [t["log"] for t in result["tasks"]] == ["met the team"]

    def test_file_tasks_missing(self, setup):
        mcp, _, _ = setup
        result = json.loads(mcp.get("file_tasks")(file_path="nope.md"))
        assert result["error"] == "File 'nope.md' not found in workspace"
        assert result["code"] == "not_found"

    def test_cache_status(self, setup):
        mcp, _, ws = setup
        result = json.loads(mcp.get("cache_status")())
        assert result["files_indexed"] == 1
        assert result["workspace_root"] == str(ws)
