from .workspace_watcher import WorkspaceWatcher

__all__ = ["WorkspaceWatcher"]
