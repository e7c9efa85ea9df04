"""
Tests for parameter validation and report formatting.
"""
import pytest

from archivist.core.errors import ArchiveError, ArchiveInvariantError, NotMediaFileError
from archivist.core.models import (
    DeDupTask, DedupParams, DedupReport, DuplicateGroup, FileSystemMode, FindParams,
    SortParams, SortReport)


class TestSortParams:
    def test_defaults(self):
        params = SortParams(source_dir="/src", archive_dir="/dst")
        assert params.mode == FileSystemMode.REAL
        assert "*.!sync" in params.ignore_patterns

    def test_blank_patterns_dropped(self):
        params = SortParams(source_dir="/src", archive_dir="/dst", ignore_patterns=[" *.tmp ", "  "])
        assert params.ignore_patterns == ["*.tmp"]

    @pytest.mark.parametrize("kwargs", [
        {"source_dir": "", "archive_dir": "/dst"},
        {"source_dir": "/src", "archive_dir": ""},
        {"source_dir": "/src", "archive_dir": "/dst", "mode": FileSystemMode.TRASH},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SortParams(**kwargs)


class TestDedupParams:
    def test_dry_run_is_default(self):
        assert DedupParams(archive_dir="/a", input_file="g.txt").mode == FileSystemMode.DRY_RUN

    @pytest.mark.parametrize("delimiter, message", [
        ("", "Empty string"),
        ("ab", "single character"),
    ])
    def test_delimiter(self, delimiter, message):
        with pytest.raises(ValueError, match=message):
            DedupParams(archive_dir="/a", input_file="g.txt", delimiter=delimiter)


class TestFindParams:
    @pytest.mark.parametrize("threshold", [-1, 65])
    def test_threshold_range(self, threshold):
        with pytest.raises(ValueError):
            FindParams(archive_dir="/a", threshold=threshold)

    def test_delimiter(self):
        with pytest.raises(ValueError):
            FindParams(archive_dir="/a", delimiter="")


class TestModels:
    def test_dedup_task_defaults_are_independent(self):
        first, second = DeDupTask(), DeDupTask()
        first.delete_files.append("x")
        assert second.delete_files == []

    def test_duplicate_group(self):
        assert DuplicateGroup(key="k", paths=["a", "b"]).is_duplicate()
        assert not DuplicateGroup(key="k", paths=["a"]).is_duplicate()

    def test_reports(self):
        assert "Failed: 1" in SortReport(failed={"a": "boom"}).print_summary()
        assert "Files deleted: 3" in DedupReport(files_deleted=3).print_summary()


class TestErrors:
    def test_error_keeps_path(self):
        error = NotMediaFileError("given file is not a media file", "/src/a.txt")
        assert error.path == "/src/a.txt"
        assert isinstance(error, ArchiveError)

    def test_invariant_error_is_archive_error(self):
        assert issubclass(ArchiveInvariantError, ArchiveError)
