"""
Core archive engine: placement, deduplication and their collaborators.

This package contains the foundation of archivist:
- ArchiveAlgorithm: canonical placement plus all/ and origin/ hard links
- deduplicate / deduplicate_all: duplicate-group plans and their execution
- MetadataOracleImpl: media type (filetype) and capture date (hachoir)
- ContentCopierImpl: single-pass copy with SHA-224 digest
- SourceScannerImpl, RecursiveWatcher: initial walk and continuous watching
- DuplicateFinderImpl: exact (xxHash64) and perceptual (phash) duplicate groups
"""

from .errors import (
    ArchiveError, NotMediaFileError, MetadataError, ArchiveIOError, ArchiveInvariantError)
from .models import (
    DeDupTask, SortResult, SortReport, DedupReport, DuplicateGroup, MediaInfo,
    FileSystemMode, FindMode, SortParams, DedupParams, FindParams)
from .archive import ArchiveAlgorithm
from .deduplication import deduplicate, deduplicate_all, is_calendar_stored_file, path_in_archive
from .hasher import ContentCopierImpl, DigestOnlyCopierImpl, Sha224AlgorithmImpl, XXHashAlgorithmImpl
from .metadata import MetadataOracleImpl
from .scanner import SourceScannerImpl, IgnoreMatcher
from .duplicate_finder import DuplicateFinderImpl

__all__ = [
    "ArchiveError",
    "NotMediaFileError",
    "MetadataError",
    "ArchiveIOError",
    "ArchiveInvariantError",
    "DeDupTask",
    "SortResult",
    "SortReport",
    "DedupReport",
    "DuplicateGroup",
    "MediaInfo",
    "FileSystemMode",
    "FindMode",
    "SortParams",
    "DedupParams",
    "FindParams",
    "ArchiveAlgorithm",
    "deduplicate",
    "deduplicate_all",
    "is_calendar_stored_file",
    "path_in_archive",
    "ContentCopierImpl",
    "DigestOnlyCopierImpl",
    "Sha224AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "MetadataOracleImpl",
    "SourceScannerImpl",
    "IgnoreMatcher",
    "DuplicateFinderImpl",
]
