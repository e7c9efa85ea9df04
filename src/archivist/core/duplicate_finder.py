"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/duplicate_finder.py
Finds groups of duplicate files inside an archive.

Two strategies:
- EXACT: size grouping, then full xxHash64 content hash
- SIMILAR: perceptual hash (phash) with a Hamming distance threshold

Hard links of one canonical file (all/ and origin/ entries) share an inode.
They are reported inside the group of their content, but a group only counts
as a duplicate when it spans at least two distinct inodes.
"""

import logging
import os
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

import imagehash
from PIL import Image

from archivist.core.hasher import XXHashAlgorithmImpl, hash_file
from archivist.core.interfaces import HashAlgorithm
from archivist.core.models import DuplicateGroup

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}


class DuplicateFinderImpl:
    """
    Groups archive files by content or by visual similarity.

    Attributes:
        algorithm: Content hash used by the exact strategy
        threshold: Max phash bit difference for the similar strategy
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None, threshold: int = 5):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.threshold = int(threshold)

    def find_exact(self, paths: List[str],
                   stopped_flag: Optional[Callable[[], bool]] = None) -> List[DuplicateGroup]:
        """Groups byte-identical files."""
        groups = []
        by_size = self._group_by(paths, lambda p: os.stat(p).st_size)
        for size, candidates in sorted(by_size.items()):
            if stopped_flag and stopped_flag():
                return []
            if self._distinct_inodes(candidates) < 2:
                continue
            by_hash = self._group_by(candidates, lambda p: hash_file(p, self.algorithm))
            for digest, members in sorted(by_hash.items()):
                if self._distinct_inodes(members) >= 2:
                    groups.append(DuplicateGroup(key=digest, paths=sorted(members)))
        return groups

    def find_similar(self, paths: List[str],
                     stopped_flag: Optional[Callable[[], bool]] = None) -> List[DuplicateGroup]:
        """Groups images whose perceptual hashes differ by at most threshold bits."""
        hash_by_inode: Dict[Tuple[int, int], Optional[imagehash.ImageHash]] = {}
        clusters: List[Tuple[imagehash.ImageHash, List[str]]] = []

        for path in sorted(p for p in paths if self.is_image_path(p)):
            if stopped_flag and stopped_flag():
                return []
            try:
                inode = self._inode(path)
            except OSError as e:
                logger.warning(f"Could not stat {path}: {e}")
                continue
            if inode not in hash_by_inode:
                hash_by_inode[inode] = self.compute_phash(path)
            phash = hash_by_inode[inode]
            if phash is None:
                continue

            for existing_hash, members in clusters:
                if existing_hash - phash <= self.threshold:
                    members.append(path)
                    break
            else:
                clusters.append((phash, [path]))

        return [
            DuplicateGroup(key=str(phash), paths=sorted(members))
            for phash, members in clusters
            if self._distinct_inodes(members) >= 2
        ]

    @staticmethod
    def is_image_path(path: str) -> bool:
        return os.path.splitext(path)[1].lower() in IMAGE_EXTENSIONS

    @staticmethod
    def compute_phash(path: str) -> Optional[imagehash.ImageHash]:
        """Perceptual hash of an image file, or None if it cannot be decoded."""
        try:
            with Image.open(path) as img:
                # Resize large images for faster processing
                if img.size[0] > 1024 or img.size[1] > 1024:
                    img.thumbnail((1024, 1024))
                return imagehash.phash(img, hash_size=8)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to compute phash for {path}: {e}")
            return None

    @staticmethod
    def _inode(path: str) -> Tuple[int, int]:
        st = os.stat(path)
        return st.st_dev, st.st_ino

    @classmethod
    def _distinct_inodes(cls, paths: List[str]) -> int:
        inodes = set()
        for path in paths:
            try:
                inodes.add(cls._inode(path))
            except OSError:
                continue
        return len(inodes)

    @staticmethod
    def _group_by(paths: List[str], key_func: Callable[[str], Any]) -> Dict[Any, List[str]]:
        """
        Groups paths by any computed key, dropping groups with less than 2 members.
        Paths whose key cannot be computed are skipped with a warning.
        """
        groups = defaultdict(list)
        skipped_files = 0
        for path in paths:
            try:
                groups[key_func(path)].append(path)
            except OSError as e:
                logger.warning(f"Error processing {path}: {e}")
                skipped_files += 1

        if skipped_files > 0:
            logger.warning(f"Skipped {skipped_files} files due to read errors")

        return {key: group for key, group in groups.items() if len(group) >= 2}
