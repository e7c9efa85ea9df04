"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the archiving system.
These protocols enforce structural typing using Python's `typing.Protocol`, so
the archive and deduplication engines can be wired with real, dry-run or test
implementations without branching on flags at each call site.

Key Components:
---------------
- MetadataOracle: Media-type detection and capture-date extraction.
- HashAlgorithm: Incremental hash functions (e.g., SHA-224, XXHASH).
- ContentCopier: Copies a file while computing its digest in one pass.
- FileSystem: The only place where the archive is mutated on disk.
"""

import os
from datetime import datetime
from typing import Protocol, List


class MetadataOracle(Protocol):
    """
    Interface for extracting metadata from a file.
    Both methods raise on failure; failure is an expected outcome.
    """

    def is_media_file(self, path: str) -> bool:
        """True if the file is an image or a video."""
        ...

    def capture_date(self, path: str) -> datetime:
        """Capture timestamp of the media file."""
        ...


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    Allows plugging in different hashing functions like SHA-224 or xxHash
    without affecting the rest of the archive logic.
    """

    def new(self):
        """Returns a fresh hash object exposing update()/hexdigest()."""
        ...


class ContentCopier(Protocol):
    """Interface for copying a file and hashing the copied bytes."""

    def copy(self, src: str, dst: str) -> str:
        """
        Copy src to dst and return the hex digest of the copied bytes.
        Source bytes are read exactly once.
        """
        ...


class FileSystem(Protocol):
    """
    Interface for every mutating disk operation on the archive.

    Primitive operations are implemented per backend (real, dry-run, trash);
    the composite helpers are shared.
    """

    def delete(self, path: str) -> None:
        """Remove a file. Raises FileNotFoundError if absent."""
        ...

    def hard_link(self, target: str, link_path: str) -> None:
        """Create link_path as a hard link to target."""
        ...

    def make_directories(self, path: str) -> None:
        """Create a directory and its parents; existing directories are fine."""
        ...

    def rename(self, src: str, dst: str) -> None:
        """Atomically move src to dst within one file system."""
        ...

    def stat(self, path: str) -> os.stat_result:
        ...

    def ensure_absent(self, path: str) -> None:
        """Delete path; absence is not an error."""
        ...

    def ensure_directory(self, path: str) -> None:
        ...

    def create_links(self, paths: List[str], target: str) -> None:
        """Replace every path in paths with a hard link to target."""
        ...

    def equal_size(self, old_file: str, new_file: str) -> bool:
        ...
