"""
Tests for reading and writing duplicate-group files.
"""
import io
import pytest

from archivist.services.duplicate_groups import DuplicateGroupService


class TestReadGroups:
    def test_space_delimited(self):
        reader = io.StringIO("/a/1.jpg /a/2.jpg\n/b/1.jpg /b/2.jpg /b/3.jpg\n")
        assert DuplicateGroupService.read_groups(reader) == [
            ["/a/1.jpg", "/a/2.jpg"],
            ["/b/1.jpg", "/b/2.jpg", "/b/3.jpg"],
        ]

    def test_custom_delimiter_allows_spaces_in_paths(self):
        reader = io.StringIO("/my photos/1.jpg|/my photos/2.jpg\n")
        assert DuplicateGroupService.read_groups(reader, "|") == [["/my photos/1.jpg", "/my photos/2.jpg"]]

    def test_blank_lines_and_repeated_delimiters(self):
        reader = io.StringIO("\n/a/1.jpg  /a/2.jpg \r\n   \n")
        assert DuplicateGroupService.read_groups(reader) == [["/a/1.jpg", "/a/2.jpg"]]

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(OSError):
            DuplicateGroupService.load(str(temp_dir / "missing.txt"))


class TestFormatGroups:
    def test_one_line_per_group(self):
        text = DuplicateGroupService.format_groups([["/a/1", "/a/2"], ["/b/1", "/b/2"]])
        assert text == "/a/1 /a/2\n/b/1 /b/2\n"

    def test_no_groups(self):
        assert DuplicateGroupService.format_groups([]) == ""

    def test_delimiter_inside_path_rejected(self):
        with pytest.raises(ValueError, match="contains the delimiter"):
            DuplicateGroupService.format_groups([["/my photos/1.jpg", "/a/2.jpg"]])

    def test_save_then_load(self, temp_dir):
        groups = [["/my photos/1.jpg", "/my photos/2.jpg"]]
        path = str(temp_dir / "groups.txt")

        DuplicateGroupService.save(path, groups, "\t")

        assert DuplicateGroupService.load(path, "\t") == groups
