from .workspace_cache import (
    DEFAULT_EXCLUDE_DIRS,
    WorkspaceCache,
    iter_markdown_files,
    parse_exclude_dirs,
)

__all__ = ["WorkspaceCache", "iter_markdown_files", "parse_exclude_dirs", "DEFAULT_EXCLUDE_DIRS"]
