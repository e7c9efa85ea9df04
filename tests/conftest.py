"""
Shared fixtures for archive core tests.
Creates isolated source/archive directories and a controllable metadata oracle.
"""
import hashlib
import pytest
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional
import sys

# Add src/ to sys.path so the 'archivist' package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from archivist.core.archive import ArchiveAlgorithm
from archivist.services.file_system import RealFileSystem

CAPTURE_DATE = datetime(2019, 4, 17, 13, 30, 44)


class FakeOracle:
    """
    Metadata oracle driven by file extension and a date table.
    Files ending in .jpg/.mp4 (any case) are media; everything else is not.
    """

    MEDIA_EXTENSIONS = {".jpg", ".jpeg", ".mp4"}

    def __init__(self, default_date: datetime = CAPTURE_DATE):
        self.default_date = default_date
        self.dates: Dict[str, datetime] = {}
        self.failing_dates = set()

    def is_media_file(self, path: str) -> bool:
        if not Path(path).exists():
            raise FileNotFoundError(path)
        return Path(path).suffix.lower() in self.MEDIA_EXTENSIONS

    def capture_date(self, path: str) -> datetime:
        if path in self.failing_dates:
            raise ValueError("no date in metadata")
        return self.dates.get(path, self.default_date)


def digest8(content: bytes) -> str:
    """First 8 hex characters of the SHA-224 digest, as used in canonical names."""
    return hashlib.sha224(content).hexdigest()[:8]


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_dir(temp_dir) -> Path:
    path = temp_dir / "source"
    path.mkdir()
    return path


@pytest.fixture
def archive_dir(temp_dir) -> Path:
    path = temp_dir / "archive"
    path.mkdir()
    return path


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def algorithm(source_dir, archive_dir, oracle) -> ArchiveAlgorithm:
    """Archive algorithm on real disk with an initialized archive."""
    a = ArchiveAlgorithm(
        source_dir=str(source_dir),
        archive_dir=str(archive_dir),
        file_system=RealFileSystem(),
        oracle=oracle,
    )
    a.init()
    return a


@pytest.fixture
def source_files(source_dir) -> Dict[str, Path]:
    """
    Creates a small camera dump:
    - 2 photos with different content in the root
    - 1 photo in a subdirectory with the same content as photo_a
    - 1 text file (not media)
    - 1 syncthing temp file (ignored by default patterns)
    """
    files = {}

    files["photo_a"] = source_dir / "IMG_0001.jpg"
    files["photo_a"].write_bytes(b"\xff\xd8\xff" + b"A" * 2048)
    files["photo_b"] = source_dir / "IMG_0002.JPG"
    files["photo_b"].write_bytes(b"\xff\xd8\xff" + b"B" * 2048)

    subdir = source_dir / "trip" / "day1"
    subdir.mkdir(parents=True)
    files["photo_copy"] = subdir / "copy_of_0001.jpg"
    files["photo_copy"].write_bytes(b"\xff\xd8\xff" + b"A" * 2048)

    files["notes"] = source_dir / "notes.txt"
    files["notes"].write_text("not a photo")

    files["sync_tmp"] = source_dir / ".syncthing.IMG_0003.jpg.tmp"
    files["sync_tmp"].write_bytes(b"partial")

    return files


def make_file(path: Path, content: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def make_link(target: Path, link: Path) -> Path:
    link.parent.mkdir(parents=True, exist_ok=True)
    link.hardlink_to(target)
    return link


def same_inode(a: Path, b: Path, c: Optional[Path] = None) -> bool:
    inodes = {p.stat().st_ino for p in (a, b, c) if p is not None}
    return len(inodes) == 1
