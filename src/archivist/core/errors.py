"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy shared by the archive and deduplication engines.
"""
from typing import Optional


class ArchiveError(RuntimeError):
    """Base class for every error raised by the archive engines."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NotMediaFileError(ArchiveError):
    """The file is neither an image nor a video. Callers skip it."""


class MetadataError(ArchiveError):
    """Media type or capture date could not be determined."""


class ArchiveIOError(ArchiveError):
    """
    A disk operation failed while placing or linking a file.
    `path` names the file that was in flight (e.g. the temporary copy).
    """


class ArchiveInvariantError(ArchiveError):
    """The archive layout does not allow the requested operation."""
