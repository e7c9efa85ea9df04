"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements the initial walk over a source tree.
Features:
- Recursively scans directories with os.walk
- Skips paths matching ignore patterns (shell-style, matched against the full path)
- Skips excluded directories (e.g. an archive located inside the source) and system trash
- Returns the directories (for the watcher) and the regular files found
"""

import fnmatch
import logging
import os
import stat
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class IgnoreMatcher:
    """Matches paths against shell-style patterns such as '*.!sync'."""

    def __init__(self, patterns: Optional[List[str]] = None):
        self.patterns = list(patterns or [])

    def match(self, path: str) -> bool:
        name = os.path.basename(path)
        return any(fnmatch.fnmatch(path, p) or fnmatch.fnmatch(name, p) for p in self.patterns)


class SourceScannerImpl:
    """
    Walks a source directory and collects files to sort.

    Attributes:
        root_dir: Root directory to scan
        ignores: Matcher for paths to leave alone
        excluded_dirs: Directories never entered
    """

    def __init__(
        self,
        root_dir: str,
        ignore_patterns: Optional[List[str]] = None,
        excluded_dirs: Optional[List[str]] = None
    ):
        self.root_dir = root_dir
        self.ignores = IgnoreMatcher(ignore_patterns)
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []

    def scan(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Tuple[List[str], List[str]]:
        """
        Returns (directories, files) below root_dir, root included in directories.
        Raises RuntimeError if root_dir is not a readable directory.
        """
        root_path = Path(self.root_dir)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        directories: List[str] = []
        files: List[str] = []

        def on_error(err: OSError) -> None:
            logger.warning(f"Permission denied during scan: {err}")

        for root, dirs, names in os.walk(str(root_path), onerror=on_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                break
            directories.append(root)

            dirs[:] = sorted(d for d in dirs if self._prefilter_dirs(Path(root) / d))
            for name in sorted(names):
                path = os.path.join(root, name)
                if self.ignores.match(path):
                    logger.debug(f"Ignoring {path}")
                    continue
                if os.path.islink(path):
                    logger.debug(f"Skipping symbolic link: {path}")
                    continue
                files.append(path)

        logger.debug(f"Scan completed. Found {len(files)} files in {len(directories)} directories.")
        return directories, files

    @staticmethod
    def _is_system_trash(path: Path) -> bool:
        """
        Check if path belongs to OS trash/recycle bin (cross-platform).
        Returns False on any error.
        """
        try:
            path_str = str(path.resolve(strict=False))
            if sys.platform == "win32":
                return "$Recycle.Bin" in path_str or "\\Recycler\\" in path_str
            if sys.platform == "darwin":
                return "/.Trash/" in path_str or path_str.endswith("/.Trash")
            return ".local/share/Trash" in path_str or "/.trash/" in path_str
        except (OSError, ValueError):
            return False

    def _is_excluded_directory(self, path: Path) -> bool:
        try:
            path_str = str(path.resolve(strict=False))
        except (OSError, ValueError):
            return False
        for excluded_dir in self.excluded_dirs:
            if path_str == excluded_dir or path_str.startswith(excluded_dir + os.sep):
                return True
        return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Pre-filter directories: skip ignored, excluded, trash and inaccessible locations."""
        if self.ignores.match(str(path)):
            logger.debug(f"Ignoring directory: {path}")
            return False
        if self._is_system_trash(path):
            logger.debug(f"Skipping system trash directory: {path}")
            return False
        if self.excluded_dirs and self._is_excluded_directory(path):
            logger.debug(f"Skipping excluded directory: {path}")
            return False
        try:
            return not path.is_symlink() and os.access(path, os.R_OK | os.X_OK)
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False


def is_normal_file(path: str) -> bool:
    """True for existing non-directory paths. Raises OSError if path cannot be stat'ed."""
    return not stat.S_ISDIR(os.stat(path).st_mode)
