"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_system.py
File system backends for the archive and deduplication engines.

- RealFileSystem: removes, links, renames and creates directories on disk.
- LoggingFileSystem: logs every mutation instead of performing it (dry run).
- TrashFileSystem: like RealFileSystem, but deleted files go to the system
  trash (via send2trash) so a wrong deduplication can be undone.
"""
import logging
import os
from typing import List

from send2trash import send2trash

from archivist.core.interfaces import FileSystem

logger = logging.getLogger(__name__)


class BaseFileSystem(FileSystem):
    """
    Composite operations shared by all backends.
    Subclasses provide delete, hard_link, make_directories, rename and stat.
    """

    def ensure_absent(self, path: str) -> None:
        try:
            self.delete(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise OSError(f"failed to remove existing file {path}: {e}") from e

    def ensure_directory(self, path: str) -> None:
        self.make_directories(path)

    def create_links(self, paths: List[str], target: str) -> None:
        for path in paths:
            try:
                self._clear_link_path(path)
            except OSError as e:
                raise OSError(f"can't ensure file is absent: {e}") from e
            try:
                self.ensure_directory(os.path.dirname(path))
            except OSError as e:
                raise OSError(f"can not create directory for link {path}: {e}") from e
            try:
                self.hard_link(target, path)
            except OSError as e:
                raise OSError(f"can not hard link {path} to {target}: {e}") from e

    def _clear_link_path(self, path: str) -> None:
        """Makes room for a link about to be (re)created at path."""
        self.ensure_absent(path)

    def equal_size(self, old_file: str, new_file: str) -> bool:
        try:
            old_stats = self.stat(old_file)
        except OSError as e:
            raise OSError(f"failed to stat old file: {e}") from e
        try:
            new_stats = self.stat(new_file)
        except OSError as e:
            raise OSError(f"failed to stat new file: {e}") from e
        return old_stats.st_size == new_stats.st_size


class RealFileSystem(BaseFileSystem):
    """Performs every operation on disk."""

    def delete(self, path: str) -> None:
        os.remove(path)
        logger.debug(f"Deleted {path}")

    def hard_link(self, target: str, link_path: str) -> None:
        os.link(target, link_path)
        logger.debug(f"Linked {link_path} -> {target}")

    def make_directories(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def rename(self, src: str, dst: str) -> None:
        os.replace(src, dst)

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)


class TrashFileSystem(RealFileSystem):
    """Moves deleted files to the system trash instead of unlinking them."""

    def delete(self, path: str) -> None:
        if not os.path.lexists(path):
            raise FileNotFoundError(f"File not found: {path}")
        send2trash(path)
        logger.debug(f"Moved to trash {path}")

    def _clear_link_path(self, path: str) -> None:
        # Replaced links point at content that stays in the archive
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


class LoggingFileSystem(BaseFileSystem):
    """
    Dry-run backend: records intended operations without touching disk.
    Control flow is identical to the real backends, since every call succeeds.
    """

    def __init__(self):
        self.operations: List[str] = []

    def _record(self, message: str) -> None:
        self.operations.append(message)
        logger.info(f"[DRY-RUN] {message}")

    def delete(self, path: str) -> None:
        self._record(f"will delete file: {path}")

    def hard_link(self, target: str, link_path: str) -> None:
        self._record(f"link {target} to {link_path}")

    def make_directories(self, path: str) -> None:
        self._record(f"create directory {path}")

    def rename(self, src: str, dst: str) -> None:
        self._record(f"rename {src} to {dst}")

    def stat(self, path: str) -> os.stat_result:
        self._record(f"stat {path}")
        return os.stat_result((0,) * 10)
