"""
Tests for server.py.

Configuration parsing runs against plain dicts; run() and main() use a fake
FastMCP whose run() returns immediately instead of serving stdio.
"""

import json
import sys
import threading
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from daily_tasks import server
from daily_tasks.cache.workspace_cache import DEFAULT_EXCLUDE_DIRS
from daily_tasks.server import ConfigError, ServerConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_BACKGROUND_THREADS = ("workspace-watcher", "workspace-cache-worker")


def _background_threads():
    return {t for t in threading.enumerate() if t.name in _BACKGROUND_THREADS}


class _FakeMCP:
    """Records tool registrations and calls daily_tasks once from run()."""

    instances = []

    def __init__(self, name):
        self.name = name
        self.tools = {}
        self.transport = None
        self.threads_during_run = set()
        self.daily = None
        _FakeMCP.instances.append(self)

    def tool(self, *args, **kwargs):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn
        return decorator

    def run(self, transport):
        self.transport = transport
        self.threads_during_run = _background_threads()
        self.daily = json.loads(self.tools["daily_tasks"](date="2024-01-01"))


@pytest.fixture
def workspace(tmp_path):
    ws = tmp_path / "ws"
    ws.mkdir()
    (ws / "today.md").write_text("- [ ] Standup\n  - 2024-01-01: done\n", encoding="utf-8")
    return ws


@pytest.fixture
def fake_mcp(monkeypatch):
    _FakeMCP.instances = []
    monkeypatch.setattr(server, "FastMCP", _FakeMCP)
    return _FakeMCP


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestServerConfig:
    def test_defaults(self, workspace):
        config = ServerConfig.from_env({"WORKSPACE_ROOT": str(workspace)})
        assert config == ServerConfig(root=workspace)
        assert config.exclude_dirs == DEFAULT_EXCLUDE_DIRS
        assert config.api_enabled is True
        assert config.api_port == 9400
        assert config.poll_interval == 5.0

    def test_overrides(self, workspace):
        config = ServerConfig.from_env({
            "WORKSPACE_ROOT": str(workspace),
            "EXCLUDE_DIRS": "build, dist",
            "API_ENABLED": "No",
            "API_PORT": "8123",
            "POLL_INTERVAL": "0.5",
        })
        assert config.exclude_dirs == {"build", "dist"}
        assert config.api_enabled is False
        assert config.api_port == 8123
        assert config.poll_interval == 0.5

    def test_empty_exclude_dirs_excludes_nothing(self, workspace):
        config = ServerConfig.from_env({"WORKSPACE_ROOT": str(workspace), "EXCLUDE_DIRS": ""})
        assert config.exclude_dirs == frozenset()

    def test_blank_numbers_use_defaults(self, workspace):
        config = ServerConfig.from_env({"WORKSPACE_ROOT": str(workspace), "API_PORT": " ", "POLL_INTERVAL": ""})
        assert config.api_port == 9400
        assert config.poll_interval == 5.0

    def test_reads_os_environ(self, workspace, monkeypatch):
        monkeypatch.setenv("WORKSPACE_ROOT", str(workspace))
        monkeypatch.setenv("API_PORT", "9500")
        assert ServerConfig.from_env().api_port == 9500

    def test_missing_root(self):
        with pytest.raises(ConfigError, match="WORKSPACE_ROOT environment variable is not set"):
            ServerConfig.from_env({})

    def test_root_not_a_directory(self, workspace):
        with pytest.raises(ConfigError, match="not a directory"):
            ServerConfig.from_env({"WORKSPACE_ROOT": str(workspace / "today.md")})

    @pytest.mark.parametrize("name,value", [("API_PORT", "http"), ("API_PORT", "94.5"), ("POLL_INTERVAL", "soon")])
    def test_non_numeric_values(self, workspace, name, value):
        with pytest.raises(ConfigError, match=name):
            ServerConfig.from_env({"WORKSPACE_ROOT": str(workspace), name: value})

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_poll_interval(self, workspace, value):
        with pytest.raises(ConfigError, match="POLL_INTERVAL must be positive"):
            ServerConfig.from_env({"WORKSPACE_ROOT": str(workspace), "POLL_INTERVAL": value})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


# ---------------------------------------------------------------------------
# Startup / shutdown
# ---------------------------------------------------------------------------

class TestRun:
    def test_run_serves_tools_then_stops_threads(self, workspace, fake_mcp):
        before = _background_threads()
        server.run(ServerConfig(root=workspace, api_enabled=False, poll_interval=60))

        mcp = fake_mcp.instances[0]
        assert mcp.name == "daily-task-logger"
        assert mcp.transport == "stdio"
        assert {"parse_tasks", "parse_tasks_all_dates", "daily_tasks", "file_tasks"} <= set(mcp.tools)
        assert [t["log"] for t in mcp.daily["files"][0]["tasks"]] == ["done"]

        started = mcp.threads_during_run - before
        assert {t.name for t in started} == set(_BACKGROUND_THREADS)
        assert not any(t.is_alive() for t in started)

    def test_main_exits_on_bad_config(self, monkeypatch, fake_mcp):
        monkeypatch.delenv("WORKSPACE_ROOT", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            server.main()
        assert exc_info.value.code == 1
        assert fake_mcp.instances == []

    def test_main_runs_with_env(self, workspace, monkeypatch, fake_mcp):
        monkeypatch.setenv("WORKSPACE_ROOT", str(workspace))
        monkeypatch.setenv("API_ENABLED", "false")
        monkeypatch.setenv("POLL_INTERVAL", "60")
        server.main()
        assert fake_mcp.instances[0].transport == "stdio"
