"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/deduplication.py
Turns groups of duplicate archive paths into link/delete plans and executes them.

Expected archive layout:
    /archive_root/
        /YEAR/MONTH/...      canonical files
        /all/...             index links
        /origin/<dir>/...    index links

Per group, the lexicographically first calendar-stored file is kept, every
other calendar-stored file is deleted, and at most one file survives in every
other directory, relinked to the kept file.
"""

import logging
import os
from typing import List, Sequence

from archivist.core.errors import ArchiveInvariantError
from archivist.core.interfaces import FileSystem
from archivist.core.models import DeDupTask, DedupReport

logger = logging.getLogger(__name__)


def deduplicate(archive_root: str, duplicate_files: Sequence[str]) -> DeDupTask:
    """
    Computes the plan for one duplicate group.

    Raises:
        ArchiveInvariantError: a path lies outside archive_root, or no path of
            the group is stored in a calendar directory
    """
    in_archive = {f: path_in_archive(archive_root, f) for f in duplicate_files}

    task = DeDupTask()
    found_in_directory = set()
    seen = set()
    for f in sorted(set(duplicate_files)):
        relative = in_archive[f]
        # Different spellings of one path ("a/./b", "a/b") name the same file
        if relative in seen:
            continue
        seen.add(relative)
        if is_calendar_stored_file(relative):
            if not task.to_keep:
                task.to_keep = f
            else:
                task.delete_files.append(f)
            continue

        directory = os.path.dirname(relative)
        if directory in found_in_directory:
            task.delete_files.append(f)
            continue
        found_in_directory.add(directory)
        task.recreate_links.append(f)

    if not task.to_keep:
        raise ArchiveInvariantError("there is no file in calendar directory")
    return task


def deduplicate_all(
        archive_root: str,
        duplicates: Sequence[Sequence[str]],
        file_system: FileSystem
) -> DedupReport:
    """
    Deduplicates every group. Mutations go through file_system, so a
    LoggingFileSystem turns this into a dry run.
    The first failure aborts the run; completed groups are not rolled back.
    """
    report = DedupReport()
    for duplicate_files in duplicates:
        try:
            task = deduplicate(archive_root, duplicate_files)
        except ArchiveInvariantError as e:
            raise ArchiveInvariantError(
                f"failed to compute deduplicate task for {list(duplicate_files)}: {e}") from e

        logger.debug(f"Executing {task!r}")
        try:
            file_system.create_links(task.recreate_links, task.to_keep)
        except OSError as e:
            raise OSError(f"failed to create links to {task.to_keep}: {e}") from e
        for to_delete in task.delete_files:
            try:
                file_system.ensure_absent(to_delete)
            except OSError as e:
                raise OSError(f"failed to delete file {to_delete}: {e}") from e

        report.groups_processed += 1
        report.links_recreated += len(task.recreate_links)
        report.files_deleted += len(task.delete_files)
        report.tasks.append(task)
    return report


def path_in_archive(archive_root: str, filename: str) -> str:
    """
    Returns the path of filename relative to archive_root.
    Raises ArchiveInvariantError if the file is not within archive_root.
    """
    rel = os.path.relpath(filename, archive_root)
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        raise ArchiveInvariantError(f"path is outside of archive: {filename}", filename)
    return rel


def is_calendar_stored_file(relative_path: str) -> bool:
    """
    True for archive-relative paths shaped YYYY/MM/<name>.
    """
    parts = _split_path(relative_path)
    if len(parts) != 3:
        return False
    year, month, name = parts
    return _is_digits(year, 4) and _is_digits(month, 2) and bool(name)


def _split_path(path: str) -> List[str]:
    parts = []
    head = path
    while head:
        head, tail = os.path.split(head)
        if not tail:
            break
        parts.append(tail)
    parts.reverse()
    return parts


def _is_digits(value: str, length: int) -> bool:
    return len(value) == length and all("0" <= c <= "9" for c in value)
