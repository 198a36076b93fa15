"""
daily-task-logger server.

``main()`` reads a ServerConfig from the environment and hands it to
``run()``, which:

* scans the workspace into a WorkspaceCache and starts its refresh worker,
* starts a WorkspaceWatcher feeding that worker,
* serves the REST API from a daemon thread when enabled,
* speaks MCP over stdio until the client disconnects, then stops the
  background threads.

Logs go to stderr; stdout belongs to the MCP transport.
"""

import logging
import os
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, FrozenSet, Mapping, Optional, Tuple, TypeVar

from mcp.server.fastmcp import FastMCP

from daily_tasks.api.tools import register_tools
from daily_tasks.cache.workspace_cache import (
    DEFAULT_EXCLUDE_DIRS,
    WorkspaceCache,
    parse_exclude_dirs,
)
from daily_tasks.watcher.workspace_watcher import DEFAULT_POLL_INTERVAL, WorkspaceWatcher

log = logging.getLogger(__name__)

SERVER_NAME = "daily-task-logger"
DEFAULT_API_PORT = 9400

_T = TypeVar("_T")


class ConfigError(ValueError):
    """The server environment is missing a setting or holds a bad value."""


def _env_value(env: Mapping[str, str], name: str, convert: Callable[[str], _T], default: _T) -> _T:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class ServerConfig:
    root: Path
    exclude_dirs: FrozenSet[str] = DEFAULT_EXCLUDE_DIRS
    api_enabled: bool = True
    api_port: int = DEFAULT_API_PORT
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build a config from environment variables (``os.environ`` by default)."""
        env = os.environ if environ is None else environ

        raw_root = env.get("WORKSPACE_ROOT", "")
        if not raw_root:
            raise ConfigError("WORKSPACE_ROOT environment variable is not set")
        root = Path(raw_root).expanduser()
        if not root.is_dir():
            raise ConfigError(f"WORKSPACE_ROOT does not exist or is not a directory: {root}")

        raw_exclude = env.get("EXCLUDE_DIRS")
        exclude_dirs = DEFAULT_EXCLUDE_DIRS if raw_exclude is None else frozenset(parse_exclude_dirs(raw_exclude))

        poll_interval = _env_value(env, "POLL_INTERVAL", float, DEFAULT_POLL_INTERVAL)
        if poll_interval <= 0:
            raise ConfigError(f"POLL_INTERVAL must be positive, got {poll_interval}")

        return cls(
            root=root,
            exclude_dirs=exclude_dirs,
            api_enabled=env.get("API_ENABLED", "true").strip().lower() in ("true", "1", "yes"),
            api_port=_env_value(env, "API_PORT", int, DEFAULT_API_PORT),
            poll_interval=poll_interval,
        )


def _serve_api(cache: WorkspaceCache, port: int) -> None:
    import uvicorn

    from daily_tasks.api.app import create_app

    log.info("REST API listening on port %d", port)
    uvicorn.run(create_app(cache), host="0.0.0.0", port=port, log_level="warning")


def start_services(config: ServerConfig) -> Tuple[WorkspaceCache, WorkspaceWatcher]:
    """Scan the workspace and start the worker, watcher and (optionally) REST threads."""
    cache = WorkspaceCache()
    cache.initialize(config.root, set(config.exclude_dirs))
    cache.start_worker()

    watcher = WorkspaceWatcher(cache, config.root, set(config.exclude_dirs), config.poll_interval)
    watcher.start()

    if config.api_enabled:
        threading.Thread(
            target=_serve_api, args=(cache, config.api_port), daemon=True, name="rest-api"
        ).start()
    return cache, watcher


def run(config: ServerConfig) -> None:
    """Serve MCP over stdio until the client goes away."""
    cache, watcher = start_services(config)

    mcp = FastMCP(SERVER_NAME)
    register_tools(mcp, cache)

    log.info("Serving %s over stdio", SERVER_NAME)
    try:
        mcp.run(transport="stdio")
    finally:
        watcher.stop()
        cache.stop_worker()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        config = ServerConfig.from_env()
    except ConfigError as exc:
        log.error("%s", exc)
        sys.exit(1)

    log.info("Workspace root: %s", config.root)
    log.info("Excluded dirs: %s", ", ".join(sorted(config.exclude_dirs)) or "(none)")
    run(config)


if __name__ == "__main__":
    main()
