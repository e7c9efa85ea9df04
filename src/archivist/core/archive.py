"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/archive.py
Placement engine: decides where a media file lives in the archive.

Archive layout:
    <archive>/YEAR/MM/<YYYYMMDD_HHMMSS>_<digest8><ext>   canonical file
    <archive>/all/<name>                                 hard link
    <archive>/origin/<source subdir>/<name>              hard link

The canonical name depends only on the capture date and the file content, so
sorting the same bytes twice lands on the same path. The existing canonical
file is kept and only the links are (re)created.
"""

import logging
import os
from datetime import datetime
from typing import Optional

from archivist.core.errors import ArchiveIOError, MetadataError, NotMediaFileError
from archivist.core.hasher import ContentCopierImpl
from archivist.core.interfaces import ContentCopier, FileSystem, MetadataOracle
from archivist.core.models import (
    ALL_DIR_NAME, ORIGIN_DIR_NAME, TEMP_FILE_NAME, TARGET_TIME_FORMAT,
    DIGEST_PREFIX_LENGTH, SortResult)

logger = logging.getLogger(__name__)


class ArchiveAlgorithm:
    """
    Copies media files from a source tree into a calendar archive and
    maintains the `all/` and `origin/` hard-link indexes.

    Attributes:
        source_dir: Root of the source tree, used for origin/ paths
        archive_dir: Root of the archive
        file_system: Backend for every mutation (real or dry run)
        oracle: Media-type and capture-date provider
        copier: Single-pass copy + digest primitive
    """

    def __init__(
        self,
        source_dir: str,
        archive_dir: str,
        file_system: FileSystem,
        oracle: MetadataOracle,
        copier: Optional[ContentCopier] = None,
    ):
        self.source_dir = source_dir
        self.archive_dir = archive_dir
        self.file_system = file_system
        self.oracle = oracle
        self.copier = copier or ContentCopierImpl()

    @property
    def all_archive_dir(self) -> str:
        return os.path.join(self.archive_dir, ALL_DIR_NAME)

    @property
    def origin_archive_dir(self) -> str:
        return os.path.join(self.archive_dir, ORIGIN_DIR_NAME)

    def init(self) -> None:
        """Creates the index directories. Call once before sorting into a fresh archive."""
        for directory in (self.all_archive_dir, self.origin_archive_dir):
            try:
                self.file_system.ensure_directory(directory)
            except OSError as e:
                raise ArchiveIOError(f"could not create target dir '{directory}': {e}", directory) from e

    def sort(self, source: str) -> str:
        """Archives source and returns the canonical path."""
        return self.sort_file(source).canonical_path

    def sort_file(self, source: str) -> SortResult:
        """
        Archives a single file.

        Raises:
            NotMediaFileError: source is not an image or video (skip it)
            MetadataError: media type or capture date unavailable
            ArchiveIOError: a copy, rename or link step failed; `path` names
                the file that was in flight
        """
        try:
            is_media = self.oracle.is_media_file(source)
        except Exception as e:
            raise MetadataError(f"could not determine media type: {e}", source) from e
        if not is_media:
            raise NotMediaFileError("given file is not a media file", source)

        try:
            date = self.oracle.capture_date(source)
        except Exception as e:
            raise MetadataError(f"could not determine creation date of media file: {e}", source) from e

        target_dir = self.calendar_dir(date)
        try:
            self.file_system.ensure_directory(target_dir)
        except OSError as e:
            raise ArchiveIOError(f"could not create target dir '{target_dir}': {e}", target_dir) from e

        tmp_file = os.path.join(target_dir, TEMP_FILE_NAME)
        try:
            digest = self.copier.copy(source, tmp_file)
        except OSError as e:
            # The temporary file stays in place for inspection
            raise ArchiveIOError(f"could not copy file and compute checksum: {e}", tmp_file) from e

        target_name = self.canonical_name(date, digest, source)
        target_path = os.path.join(target_dir, target_name)
        if self._already_archived(tmp_file, target_path):
            # Keep the existing inode; origin links from earlier sorts point at it
            logger.debug(f"{target_path} already archived, keeping existing file")
            try:
                self.file_system.ensure_absent(tmp_file)
            except OSError as e:
                raise ArchiveIOError(f"could not remove temporary file: {e}", tmp_file) from e
        else:
            try:
                self.file_system.rename(tmp_file, target_path)
            except OSError as e:
                raise ArchiveIOError(f"could not mv temporary file to target name: {e}", tmp_file) from e

        all_link = os.path.join(self.all_archive_dir, target_name)
        origin_link = self.origin_link_path(source, target_name)
        links = [all_link, origin_link]
        try:
            self.file_system.create_links(links, target_path)
        except OSError as e:
            raise ArchiveIOError(f"could not create index links: {e}", target_path) from e

        logger.info(f"{source} --> {target_path}")
        return SortResult(source=source, canonical_path=target_path, links=links)

    def _already_archived(self, tmp_file: str, target_path: str) -> bool:
        """True if target_path holds the content just copied (same digest prefix in its name, same size)."""
        if not os.path.isfile(target_path):
            return False
        try:
            return self.file_system.equal_size(tmp_file, target_path)
        except OSError as e:
            raise ArchiveIOError(f"could not compare with existing file: {e}", tmp_file) from e

    def calendar_dir(self, date: datetime) -> str:
        """<archive>/YEAR/MM in the timestamp's own zone."""
        return os.path.join(self.archive_dir, f"{date.year}", f"{date.month:02d}")

    @staticmethod
    def canonical_name(date: datetime, digest: str, source: str) -> str:
        _, ext = os.path.splitext(source)
        return f"{date.strftime(TARGET_TIME_FORMAT)}_{digest[:DIGEST_PREFIX_LENGTH]}{ext}"

    def origin_link_path(self, source: str, target_name: str) -> str:
        """origin/<directory of source relative to source_dir>/<target_name>."""
        path_in_source = os.path.relpath(os.path.abspath(source), os.path.abspath(self.source_dir))
        if path_in_source == os.pardir or path_in_source.startswith(os.pardir + os.sep):
            raise ArchiveIOError(
                f"failed to determine relative path: {source} is outside of {self.source_dir}", source)
        dir_name = os.path.dirname(path_in_source)
        return os.path.normpath(os.path.join(self.origin_archive_dir, dir_name, target_name))
