"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and parameter objects for archiving and deduplication.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Optional
from enum import Enum


ALL_DIR_NAME = "all"
ORIGIN_DIR_NAME = "origin"
TEMP_FILE_NAME = "archivist.tmp"
TARGET_TIME_FORMAT = "%Y%m%d_%H%M%S"
DIGEST_PREFIX_LENGTH = 8

DEFAULT_IGNORE_PATTERNS = ["*.@__thumb*", "*.syncthing.*tmp", "*.!sync"]


# =============================
# Enums
# =============================

class FileSystemMode(Enum):
    """
    How mutations of the archive are carried out.
    """
    REAL = "real"
    DRY_RUN = "dry-run"
    TRASH = "trash"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            FileSystemMode.REAL: "Real",
            FileSystemMode.DRY_RUN: "Dry run",
            FileSystemMode.TRASH: "Move to trash",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class FindMode(Enum):
    """
    Strategy used to group duplicates inside an archive.
    """
    EXACT = "exact"
    SIMILAR = "similar"

    @property
    def description(self) -> str:
        mapping = {
            FindMode.EXACT: "Size → Full content hash (byte-identical files)",
            FindMode.SIMILAR: "Perceptual hash (visually similar images)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass
class DeDupTask:
    """
    Plan for a single duplicate group.

    to_keep is the calendar-stored file that stays canonical,
    recreate_links must (again) become hard links to to_keep,
    delete_files are removed.
    """
    to_keep: str = ""
    recreate_links: List[str] = field(default_factory=list)
    delete_files: List[str] = field(default_factory=list)

    def __repr__(self):
        return (f"<DeDupTask keep={self.to_keep}, links={len(self.recreate_links)}, "
                f"delete={len(self.delete_files)}>")


@dataclass
class SortResult:
    """Outcome of archiving one source file."""
    source: str
    canonical_path: str
    links: List[str] = field(default_factory=list)

    def __repr__(self):
        return f"<SortResult {self.source} -> {self.canonical_path}>"


@dataclass
class MediaInfo:
    """Metadata of one file as reported by the metadata oracle."""
    path: str
    is_media: bool = False
    capture_date: Optional[datetime] = None
    error: Optional[str] = None
    failed_stage: Optional[str] = None  # "type" or "date"


@dataclass
class DuplicateGroup:
    """
    Paths found to hold the same (or visually similar) content.
    """
    key: str
    paths: List[str]

    @property
    def duplicate_count(self) -> int:
        return len(self.paths)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup key={self.key}, count={len(self.paths)}>"


@dataclass
class SortReport:
    """
    Statistics collected during a batch sort.
    """
    archived: List[SortResult] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    total_time: float = 0.0

    def print_summary(self) -> str:
        lines = [
            "📊 Sort Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"📁 Archived: {len(self.archived)}",
            f"⏭  Skipped (not media): {len(self.skipped)}",
            f"❌ Failed: {len(self.failed)}",
        ]
        return "\n".join(lines)


@dataclass
class DedupReport:
    """
    Statistics collected while executing deduplication plans.
    """
    groups_processed: int = 0
    links_recreated: int = 0
    files_deleted: int = 0
    tasks: List[DeDupTask] = field(default_factory=list)

    def print_summary(self) -> str:
        return "\n".join([
            "📊 Deduplication Statistics:",
            f"Groups: {self.groups_processed}",
            f"🔗 Links recreated: {self.links_recreated}",
            f"🗑  Files deleted: {self.files_deleted}",
        ])


"""
DTOs for command parameters with built-in validation.
Interface-agnostic, used by the CLI and by library callers.
"""

@dataclass
class SortParams:
    """Parameters for sorting a source directory into an archive."""
    source_dir: str
    archive_dir: str
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    watch: bool = False
    mode: FileSystemMode = FileSystemMode.REAL

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.source_dir:
            raise ValueError("Source directory cannot be empty")
        if not self.archive_dir:
            raise ValueError("Target directory cannot be empty")
        if self.mode == FileSystemMode.TRASH:
            raise ValueError("Trash mode is only supported for deduplication")
        self.ignore_patterns = [p.strip() for p in self.ignore_patterns if p.strip()]


@dataclass
class DedupParams:
    """Parameters for deduplicating an archive from a duplicate-group file."""
    archive_dir: str
    input_file: str
    delimiter: str = " "
    mode: FileSystemMode = FileSystemMode.DRY_RUN

    def __post_init__(self):
        if not self.archive_dir:
            raise ValueError("Archive directory cannot be empty")
        if not self.input_file:
            raise ValueError("Input file cannot be empty")
        if len(self.delimiter) < 1:
            raise ValueError("Empty string not allowed as delimiter")
        if len(self.delimiter) > 1:
            raise ValueError(
                f"Can only use a single character as delimiter. "
                f"'{self.delimiter}' has the length {len(self.delimiter)}"
            )


@dataclass
class FindParams:
    """Parameters for finding duplicate groups inside an archive."""
    archive_dir: str
    mode: FindMode = FindMode.EXACT
    threshold: int = 5
    delimiter: str = " "
    output_file: Optional[str] = None

    def __post_init__(self):
        if not self.archive_dir:
            raise ValueError("Archive directory cannot be empty")
        if not 0 <= self.threshold <= 64:
            raise ValueError("Threshold must be between 0 and 64")
        if len(self.delimiter) != 1:
            raise ValueError("Delimiter must be a single character")
