"""
Archivist sorts photos and videos into a date-based archive and removes duplicates.

Core features:
- Canonical files stored once under YEAR/MM, named by capture date and content digest
- all/ and origin/ index trees made of hard links
- Deduplication plans from externally supplied duplicate groups
- Dry-run and trash backends for every mutating operation
- CLI interface with sort (optionally watching), dedup, find-duplicates and list
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("archivist")
except Exception:
    __version__ = "0.0.0"

# Public API, only what users should import directly
from archivist.commands import (
    SortCommand, DeduplicationCommand, FindDuplicatesCommand, ListCommand, create_file_system)
from archivist.core import (
    ArchiveAlgorithm, DeDupTask, SortResult, deduplicate, deduplicate_all,
    ArchiveError, NotMediaFileError, MetadataError, ArchiveIOError, ArchiveInvariantError)
from archivist.services import RealFileSystem, LoggingFileSystem, TrashFileSystem

__all__ = [
    "SortCommand",
    "DeduplicationCommand",
    "FindDuplicatesCommand",
    "ListCommand",
    "create_file_system",
    "ArchiveAlgorithm",
    "DeDupTask",
    "SortResult",
    "deduplicate",
    "deduplicate_all",
    "ArchiveError",
    "NotMediaFileError",
    "MetadataError",
    "ArchiveIOError",
    "ArchiveInvariantError",
    "RealFileSystem",
    "LoggingFileSystem",
    "TrashFileSystem",
    "__version__",
]
