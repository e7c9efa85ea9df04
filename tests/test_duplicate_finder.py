"""
Tests for duplicate group detection inside an archive.
Hard links of one canonical file must never form a duplicate group on their own.
"""
import random
import pytest

from PIL import Image, ImageDraw

from archivist.core.duplicate_finder import DuplicateFinderImpl
from conftest import make_file, make_link


def draw_image(path, seed: int):
    """Saves a reproducible image with random shapes."""
    rng = random.Random(seed)
    img = Image.new("RGB", (128, 128), color=(255, 255, 255))
    draw = ImageDraw.Draw(img)
    for _ in range(12):
        x0, y0 = rng.randint(0, 100), rng.randint(0, 100)
        color = (rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))
        draw.rectangle([x0, y0, x0 + rng.randint(5, 27), y0 + rng.randint(5, 27)], fill=color)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return path


class TestFindExact:
    def test_groups_identical_content(self, archive_dir):
        a = make_file(archive_dir / "2019" / "04" / "a.jpg", b"same content")
        b = make_file(archive_dir / "2019" / "05" / "b.jpg", b"same content")
        make_file(archive_dir / "2019" / "04" / "c.jpg", b"other content")

        groups = DuplicateFinderImpl().find_exact([str(p) for p in archive_dir.rglob("*.jpg")])

        assert len(groups) == 1
        assert groups[0].paths == sorted([str(a), str(b)])
        assert groups[0].is_duplicate()

    def test_same_size_different_content(self, archive_dir):
        make_file(archive_dir / "a.jpg", b"aaaa")
        make_file(archive_dir / "b.jpg", b"bbbb")

        groups = DuplicateFinderImpl().find_exact([str(p) for p in archive_dir.rglob("*.jpg")])

        assert groups == []

    def test_hard_links_alone_are_not_duplicates(self, archive_dir):
        """all/ and origin/ links of a single canonical file share its inode."""
        canonical = make_file(archive_dir / "2019" / "04" / "a.jpg", b"photo")
        make_link(canonical, archive_dir / "all" / "a.jpg")
        make_link(canonical, archive_dir / "origin" / "a.jpg")

        groups = DuplicateFinderImpl().find_exact([str(p) for p in archive_dir.rglob("*.jpg")])

        assert groups == []

    def test_group_includes_links(self, archive_dir):
        """Once content is duplicated, the links are reported too so they can be relinked."""
        a = make_file(archive_dir / "2019" / "04" / "a.jpg", b"photo")
        b = make_file(archive_dir / "2019" / "04" / "b.jpg", b"photo")
        link = make_link(b, archive_dir / "all" / "b.jpg")

        groups = DuplicateFinderImpl().find_exact([str(a), str(b), str(link)])

        assert groups[0].paths == sorted([str(a), str(b), str(link)])

    def test_missing_file_skipped(self, archive_dir):
        a = make_file(archive_dir / "a.jpg", b"photo")
        b = make_file(archive_dir / "b.jpg", b"photo")

        groups = DuplicateFinderImpl().find_exact([str(a), str(b), str(archive_dir / "gone.jpg")])

        assert len(groups) == 1

    def test_stopped_flag(self, archive_dir):
        a = make_file(archive_dir / "a.jpg", b"photo")
        b = make_file(archive_dir / "b.jpg", b"photo")
        assert DuplicateFinderImpl().find_exact([str(a), str(b)], stopped_flag=lambda: True) == []


class TestFindSimilar:
    def test_copies_of_one_image_are_grouped(self, archive_dir):
        a = draw_image(archive_dir / "2019" / "04" / "a.png", seed=1)
        b = make_file(archive_dir / "2020" / "01" / "b.png", a.read_bytes())
        other = draw_image(archive_dir / "2019" / "04" / "other.png", seed=99)

        groups = DuplicateFinderImpl(threshold=0).find_similar([str(a), str(b), str(other)])

        assert len(groups) == 1
        assert groups[0].paths == sorted([str(a), str(b)])

    def test_non_images_ignored(self, archive_dir):
        a = make_file(archive_dir / "a.mp4", b"video")
        b = make_file(archive_dir / "b.mp4", b"video")
        assert DuplicateFinderImpl().find_similar([str(a), str(b)]) == []

    def test_undecodable_image_skipped(self, archive_dir):
        broken = make_file(archive_dir / "broken.png", b"not really a png")
        a = draw_image(archive_dir / "a.png", seed=1)

        assert DuplicateFinderImpl().find_similar([str(broken), str(a)]) == []

    def test_linked_image_alone_not_grouped(self, archive_dir):
        a = draw_image(archive_dir / "2019" / "04" / "a.png", seed=3)
        link = make_link(a, archive_dir / "all" / "a.png")

        assert DuplicateFinderImpl().find_similar([str(a), str(link)]) == []


class TestPhash:
    def test_identical_images_have_zero_distance(self, temp_dir):
        a = draw_image(temp_dir / "a.png", seed=7)
        b = draw_image(temp_dir / "b.png", seed=7)
        assert DuplicateFinderImpl.compute_phash(str(a)) - DuplicateFinderImpl.compute_phash(str(b)) == 0

    def test_large_image_is_hashed(self, temp_dir):
        path = temp_dir / "large.png"
        Image.new("RGB", (2048, 1536), color=(10, 20, 30)).save(path)
        assert DuplicateFinderImpl.compute_phash(str(path)) is not None

    @pytest.mark.parametrize("path, expected", [
        ("a.JPG", True), ("a.png", True), ("a.webp", True), ("a.mp4", False), ("a", False),
    ])
    def test_is_image_path(self, path, expected):
        assert DuplicateFinderImpl.is_image_path(path) is expected
