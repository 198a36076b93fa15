"""
Thread-safe in-memory cache of the workspace's markdown files.

Design:
    Primary store — Dict[Path, CachedFile]   (raw lines + mtime per file)

Files are stored as raw lines and parsed on demand: parsing is a single cheap
pass, and the target date differs from one request to the next.

All mutations acquire _lock (threading.RLock).
The file watcher queues paths on _update_queue; a worker thread drains it.
"""

import logging
import queue
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Set

from daily_tasks.models.task import CachedFile, FileTaskGroup, Record
from daily_tasks.parsers.task_parser import (
    MARKDOWN_SUFFIXES,
    parse_tasks,
    parse_tasks_all_dates,
    read_lines,
)

log = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = frozenset({".git", "node_modules"})


def parse_exclude_dirs(raw: str) -> Set[str]:
    """Parse a comma-separated list of directory names to exclude."""
    return {part.strip() for part in raw.split(",") if part.strip()}


def is_markdown_file(path: Path) -> bool:
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def iter_markdown_files(root: Path, exclude_dirs: Set[str]) -> Iterator[Path]:
    """Yield every markdown file under root, skipping excluded directories."""
    for path in root.rglob("*"):
        if not is_markdown_file(path):
            continue
        try:
            rel = path.relative_to(root)
        except ValueError:
            continue
        if any(part in exclude_dirs for part in rel.parts[:-1]):
            continue
        if path.is_file():
            yield path


class WorkspaceCache:
    """
    Thread-safe cache of markdown files under a workspace root.

    Initialize with initialize(), then start the background worker with
    start_worker(). The watcher calls enqueue_refresh() to schedule file
    re-reads without blocking the watcher thread.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._files: Dict[Path, CachedFile] = {}
        self._root: Optional[Path] = None
        self._exclude_dirs: Set[str] = set()
        self._update_queue: "queue.Queue[Optional[Path]]" = queue.Queue()
        self._worker_thread: Optional[threading.Thread] = None
        self._last_full_scan: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def initialize(self, root: Path, exclude_dirs: Set[str]) -> None:
        """
        Full workspace scan. Blocks until complete.
        Call once at startup before starting the watcher.
        """
        self._root = root
        self._exclude_dirs = set(exclude_dirs)
        log.info("Starting workspace scan: %s", root)
        with self._lock:
            self._files.clear()
            for path in iter_markdown_files(root, self._exclude_dirs):
                self._load_file(path)
            self._last_full_scan = datetime.now()
        log.info("Workspace scan complete: %d markdown files", len(self._files))

    def start_worker(self) -> None:
        """Start the background queue-drain worker thread (daemon)."""
        self._worker_thread = threading.Thread(
            target=self._worker_loop, daemon=True, name="workspace-cache-worker"
        )
        self._worker_thread.start()

    def stop_worker(self) -> None:
        """Signal the worker thread to stop and wait for it."""
        self._update_queue.put(None)  # sentinel
        if self._worker_thread:
            self._worker_thread.join(timeout=5)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load_file(self, path: Path) -> None:
        """Read a markdown file into the cache (caller holds _lock)."""
        try:
            mtime = path.stat().st_mtime
            lines = read_lines(path)
        except OSError:
            log.exception("Failed to read %s", path)
            return
        self._files[path] = CachedFile(file_path=path, lines=lines, mtime=mtime)

    def _worker_loop(self) -> None:
        """Drain the update queue, re-reading files as they arrive."""
        while True:
            item = self._update_queue.get()
            if item is None:  # sentinel → stop
                break
            try:
                self.refresh_file(item)
            except Exception:
                log.exception("Worker failed to refresh %s", item)

    def _is_excluded(self, path: Path) -> bool:
        if self._root is None:
            return False
        try:
            rel = path.relative_to(self._root)
        except ValueError:
            return True
        return any(part in self._exclude_dirs for part in rel.parts[:-1])

    def _sorted_files(self) -> List[CachedFile]:
        # Every cached path shares the root prefix, so this is relative-path order
        return sorted(self._files.values(), key=lambda c: c.file_path.as_posix())

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def enqueue_refresh(self, path: Path) -> None:
        """Schedule a file re-read from a watcher callback (non-blocking)."""
        self._update_queue.put(path)

    def refresh_file(self, path: Path) -> None:
        """
        Re-read a single markdown file if its mtime changed; drop it if it is gone.
        Thread-safe; blocks on _lock.
        """
        if not is_markdown_file(path) or self._is_excluded(path):
            return

        if not path.exists():
            self._remove_file(path)
            return

        try:
            mtime = path.stat().st_mtime
        except OSError:
            return

        with self._lock:
            existing = self._files.get(path)
            if existing and existing.mtime == mtime:
                return  # Already up to date
            log.debug("Refreshing %s", path)
            self._load_file(path)

    def _remove_file(self, path: Path) -> None:
        with self._lock:
            if self._files.pop(path, None) is not None:
                log.debug("Removed %s from cache", path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def mtimes(self) -> Dict[Path, float]:
        """Snapshot of {path: mtime} for every indexed file."""
        with self._lock:
            return {path: cached.mtime for path, cached in self._files.items()}

    def get_lines(self, path: Path) -> Optional[List[str]]:
        """Return the cached lines of a file, or None if it is not indexed."""
        with self._lock:
            cached = self._files.get(path)
            return list(cached.lines) if cached else None

    def resolve(self, file_path: str) -> Optional[Path]:
        """
        Map a user-supplied path (absolute, or relative to the root) to an
        indexed file.
        """
        candidate = Path(file_path)
        if not candidate.is_absolute() and self._root is not None:
            candidate = self._root / candidate
        with self._lock:
            if candidate in self._files:
                return candidate
            resolved = candidate.resolve()
            for path in self._files:
                if path.resolve() == resolved:
                    return path
        return None

    def _collect(self, parse: Callable[[List[str]], List[Record]]) -> List[FileTaskGroup]:
        groups: List[FileTaskGroup] = []
        with self._lock:
            for cached in self._sorted_files():
                tasks = parse(cached.lines)
                if tasks:
                    groups.append(
                        FileTaskGroup(
                            file_path=cached.file_path,
                            file_name=cached.file_path.name,
                            tasks=list(tasks),
                        )
                    )
        return groups

    def collect_tasks(self, target_date: str) -> List[FileTaskGroup]:
        """Log entries for ``target_date``, grouped per file; files with none are omitted."""
        return self._collect(lambda lines: parse_tasks(lines, target_date))

    def collect_all_dates(self) -> List[FileTaskGroup]:
        """Every log entry and no-log placeholder, grouped per file."""
        return self._collect(parse_tasks_all_dates)

    # ------------------------------------------------------------------
    # Status / diagnostics
    # ------------------------------------------------------------------

    def status(self) -> dict:
        with self._lock:
            return {
                "files_indexed": len(self._files),
                "lines_indexed": sum(len(c.lines) for c in self._files.values()),
                "last_full_scan": self._last_full_scan.isoformat() if self._last_full_scan else None,
                "workspace_root": str(self._root) if self._root else None,
                "exclude_dirs": sorted(self._exclude_dirs),
            }
