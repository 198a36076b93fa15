"""
Polling watcher that keeps a WorkspaceCache in step with the disk.

Each poll walks the workspace and compares file mtimes with the mtimes the
cache holds. Any file that differs is handed to the cache worker through
enqueue_refresh(). The watcher keeps no file state of its own, so edits made
between the initial scan and the first poll are picked up too.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Set

from daily_tasks.cache.workspace_cache import iter_markdown_files

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


def stale_paths(cached: Mapping[Path, float], on_disk: Mapping[Path, float]) -> List[Path]:
    """
    Paths whose cache entry no longer matches the disk: new files, deleted
    files, and files whose mtime moved in either direction.
    """
    stale = {path for path, mtime in on_disk.items() if cached.get(path) != mtime}
    stale.update(path for path in cached if path not in on_disk)
    return sorted(stale)


class WorkspaceWatcher:
    """
    Background poller for one workspace.

        watcher = WorkspaceWatcher(cache, root, exclude_dirs, poll_interval=2.0)
        watcher.start()
        ...
        watcher.stop()

    Unreadable files never make it into the cache, so they are offered to
    the worker again on every poll until they can be read or are removed.
    """

    def __init__(
        self,
        cache,
        root: Path,
        exclude_dirs: Set[str],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self._cache = cache
        self._root = root
        self._exclude_dirs = set(exclude_dirs)
        self.poll_interval = poll_interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        log.info("Watching %s every %.1fs", self._root, self.poll_interval)
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="workspace-watcher")
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=self.poll_interval + 2)
            self._thread = None
        log.info("Workspace watcher stopped")

    def poll_once(self) -> List[Path]:
        """Run one poll cycle; returns the paths queued for refresh."""
        stale = stale_paths(self._cache.mtimes(), self._disk_mtimes())
        for path in stale:
            log.debug("Queueing refresh of %s", path)
            self._cache.enqueue_refresh(path)
        return stale

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        # wait() doubles as the sleep and returns True once stop() is called
        while not self._stop_event.wait(self.poll_interval):
            try:
                self.poll_once()
            except Exception:
                log.exception("Workspace poll failed")

    def _disk_mtimes(self) -> Dict[Path, float]:
        mtimes: Dict[Path, float] = {}
        try:
            for path in iter_markdown_files(self._root, self._exclude_dirs):
                try:
                    mtimes[path] = path.stat().st_mtime
                except OSError:
                    continue  # vanished mid-walk; next poll sees the deletion
        except OSError:
            log.exception("Failed to walk %s", self._root)
        return mtimes
