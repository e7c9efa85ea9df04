"""
Unified command orchestrators for sorting, deduplicating and inspecting archives.
This is the SINGLE source of truth for workflow logic, used by the CLI and library callers.
"""
import logging
import os
import time
from typing import Callable, List, Optional

from archivist.core.archive import ArchiveAlgorithm
from archivist.core.deduplication import deduplicate_all
from archivist.core.duplicate_finder import DuplicateFinderImpl
from archivist.core.errors import ArchiveError, NotMediaFileError
from archivist.core.hasher import ContentCopierImpl, DigestOnlyCopierImpl
from archivist.core.interfaces import FileSystem, MetadataOracle
from archivist.core.metadata import MetadataOracleImpl
from archivist.core.models import (
    DedupParams, DedupReport, DuplicateGroup, FileSystemMode, FindMode, FindParams,
    MediaInfo, SortParams, SortReport, SortResult)
from archivist.core.scanner import SourceScannerImpl, is_normal_file
from archivist.core.watcher import RecursiveWatcher
from archivist.services.duplicate_groups import DuplicateGroupService
from archivist.services.file_system import LoggingFileSystem, RealFileSystem, TrashFileSystem

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]
ResultCallback = Callable[[str, Optional[SortResult], Optional[Exception]], None]


def create_file_system(mode: FileSystemMode) -> FileSystem:
    """Returns the backend for the given mode."""
    if mode == FileSystemMode.DRY_RUN:
        return LoggingFileSystem()
    if mode == FileSystemMode.TRASH:
        return TrashFileSystem()
    return RealFileSystem()


class SortCommand:
    """
    Orchestrates sorting a source tree into an archive:
    1. Create the archive index directories
    2. Sort every file found by the initial scan
    3. Optionally keep sorting files reported by the watcher

    Usage:
        params = SortParams(source_dir=src, archive_dir=dst)
        command = SortCommand()
        report = command.execute(params, result_callback=printer)
        command.watch(params, result_callback=printer, stopped_flag=check)
    """

    def __init__(self, oracle: Optional[MetadataOracle] = None):
        self._oracle = oracle or MetadataOracleImpl()
        self._algorithm: Optional[ArchiveAlgorithm] = None

    def build_algorithm(self, params: SortParams) -> ArchiveAlgorithm:
        file_system = create_file_system(params.mode)
        copier = DigestOnlyCopierImpl() if params.mode == FileSystemMode.DRY_RUN else ContentCopierImpl()
        return ArchiveAlgorithm(
            source_dir=params.source_dir,
            archive_dir=params.archive_dir,
            file_system=file_system,
            oracle=self._oracle,
            copier=copier,
        )

    def execute(
            self,
            params: SortParams,
            progress_callback: Optional[ProgressCallback] = None,
            result_callback: Optional[ResultCallback] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> SortReport:
        """
        Runs the initial sort. Individual file failures are recorded in the
        report and do not stop the batch.

        Raises:
            ArchiveIOError: If the archive index directories cannot be created
            RuntimeError: If the source directory cannot be scanned
        """
        start = time.time()
        self._algorithm = self.build_algorithm(params)
        self._algorithm.init()

        scanner = SourceScannerImpl(
            root_dir=params.source_dir,
            ignore_patterns=params.ignore_patterns,
            excluded_dirs=[params.archive_dir],
        )
        _, files = scanner.scan(stopped_flag=stopped_flag)

        report = SortReport()
        total = len(files)
        for index, path in enumerate(files, 1):
            if stopped_flag and stopped_flag():
                break
            self.sort_path(path, report, result_callback)
            if progress_callback:
                progress_callback("sorting", index, total)

        report.total_time = time.time() - start
        return report

    def sort_path(
            self,
            path: str,
            report: SortReport,
            result_callback: Optional[ResultCallback] = None
    ) -> Optional[SortResult]:
        """Sorts one file, recording the outcome in report."""
        try:
            result = self._algorithm.sort_file(path)
        except NotMediaFileError:
            logger.debug(f"Skipping non-media file {path}")
            report.skipped.append(path)
            return None
        except ArchiveError as e:
            logger.error(f"Can't sort file {path}: {e}")
            report.failed[path] = str(e)
            if result_callback:
                result_callback(path, None, e)
            return None

        report.archived.append(result)
        if result_callback:
            result_callback(path, result, None)
        return result

    def watch(
            self,
            params: SortParams,
            result_callback: Optional[ResultCallback] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            watcher: Optional[RecursiveWatcher] = None
    ) -> SortReport:
        """
        Sorts files as they appear below the source directory until
        stopped_flag returns True. Call execute() first.
        """
        if self._algorithm is None:
            raise RuntimeError("Initial sort must run before watching")

        archive_root = os.path.abspath(params.archive_dir)
        report = SortReport()
        watcher = watcher or RecursiveWatcher([params.source_dir], params.ignore_patterns)
        with watcher:
            for path in watcher.iter_events(stopped_flag):
                if os.path.abspath(path).startswith(archive_root + os.sep):
                    continue
                try:
                    if not is_normal_file(path):
                        continue
                except FileNotFoundError:
                    continue
                except OSError as e:
                    logger.warning(f"could not stat file: {e}")
                    continue
                self.sort_path(path, report, result_callback)
        return report


class DeduplicationCommand:
    """
    Loads duplicate groups from a file and deduplicates the archive.
    Aborts on the first failure; re-running is safe.
    """

    def execute(self, params: DedupParams, groups: Optional[List[List[str]]] = None) -> DedupReport:
        """
        Raises:
            OSError: If the group file cannot be read or a disk operation fails
            ArchiveInvariantError: If a group has no calendar-stored file or leaves the archive
        """
        if groups is None:
            groups = DuplicateGroupService.load(params.input_file, params.delimiter)
        file_system = create_file_system(params.mode)
        logger.info(f"Deduplicating {len(groups)} groups ({params.mode.display_name})")
        return deduplicate_all(params.archive_dir, groups, file_system)


class FindDuplicatesCommand:
    """Scans an archive and reports duplicate groups."""

    def execute(
            self,
            params: FindParams,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> List[DuplicateGroup]:
        _, files = SourceScannerImpl(root_dir=params.archive_dir).scan(stopped_flag=stopped_flag)
        finder = DuplicateFinderImpl(threshold=params.threshold)
        if params.mode == FindMode.SIMILAR:
            groups = finder.find_similar(files, stopped_flag=stopped_flag)
        else:
            groups = finder.find_exact(files, stopped_flag=stopped_flag)

        if params.output_file:
            DuplicateGroupService.save(params.output_file, [g.paths for g in groups], params.delimiter)
        return groups


class ListCommand:
    """Reports media type and capture date for every file below a directory."""

    def __init__(self, oracle: Optional[MetadataOracleImpl] = None):
        self._oracle = oracle or MetadataOracleImpl()

    def execute(self, directory: str) -> List[MediaInfo]:
        _, files = SourceScannerImpl(root_dir=directory).scan()
        return [self._oracle.describe(path) for path in files]
