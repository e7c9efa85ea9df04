"""File system backends and duplicate-group file services."""

from .file_system import RealFileSystem, LoggingFileSystem, TrashFileSystem
from .duplicate_groups import DuplicateGroupService

__all__ = ["RealFileSystem", "LoggingFileSystem", "TrashFileSystem", "DuplicateGroupService"]
