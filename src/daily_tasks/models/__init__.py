from .task import CachedFile, DatedTaskLog, FileTaskGroup, Record, TaskLog, TaskMarker

__all__ = [
    "TaskMarker",
    "TaskLog",
    "DatedTaskLog",
    "Record",
    "FileTaskGroup",
    "CachedFile",
]
