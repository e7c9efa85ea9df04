"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements single-pass copy-and-digest and pluggable hash algorithms.

ContentCopierImpl streams the source once, feeding every chunk both to the
destination file and to the hash object. The digest names the canonical file,
so it must describe exactly the bytes that were written.
"""

import hashlib
import logging
import os
import shutil

import xxhash

from archivist.core.interfaces import ContentCopier, HashAlgorithm

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


# Use the same way to implement and use any other hashing algorithm
class Sha224AlgorithmImpl(HashAlgorithm):
    def new(self):
        return hashlib.sha224()


class XXHashAlgorithmImpl(HashAlgorithm):
    def new(self):
        return xxhash.xxh64()


class ContentCopierImpl(ContentCopier):
    """
    Copies a file and computes its digest with the injected algorithm.

    Checks free space at the destination first, preserves the source
    modification time on the copy and syncs the copy to disk.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = COPY_CHUNK_SIZE):
        self.algorithm = algorithm or Sha224AlgorithmImpl()
        self.chunk_size = chunk_size

    def copy(self, src: str, dst: str) -> str:
        src_stat = os.stat(src)
        if os.path.isdir(src):
            raise IsADirectoryError(f"src is a directory: {src}")

        free = self._free_disk_size(dst)
        if free < src_stat.st_size:
            raise OSError(f"not enough space left in {os.path.dirname(dst)}")

        digest = self.algorithm.new()
        with open(src, "rb") as src_file, open(dst, "wb") as dst_file:
            while True:
                chunk = src_file.read(self.chunk_size)
                if not chunk:
                    break
                digest.update(chunk)
                dst_file.write(chunk)
            dst_file.flush()
            os.fsync(dst_file.fileno())

        os.utime(dst, (src_stat.st_atime, src_stat.st_mtime))
        logger.debug(f"Copied {src} -> {dst} ({src_stat.st_size} bytes)")
        return digest.hexdigest()

    @staticmethod
    def _free_disk_size(path: str) -> int:
        directory = path if os.path.isdir(path) else os.path.dirname(path) or "."
        return shutil.disk_usage(directory).free


class DigestOnlyCopierImpl(ContentCopier):
    """
    Reads and hashes the source without writing anything.
    Used in dry-run mode so canonical names can still be reported.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = COPY_CHUNK_SIZE):
        self.algorithm = algorithm or Sha224AlgorithmImpl()
        self.chunk_size = chunk_size

    def copy(self, src: str, dst: str) -> str:
        digest = self.algorithm.new()
        with open(src, "rb") as src_file:
            for chunk in iter(lambda: src_file.read(self.chunk_size), b""):
                digest.update(chunk)
        logger.info(f"[DRY-RUN] copy {src} to {dst}")
        return digest.hexdigest()


def hash_file(path: str, algorithm: HashAlgorithm = None, chunk_size: int = COPY_CHUNK_SIZE) -> str:
    """Computes the hex digest of a whole file."""
    digest = (algorithm or XXHashAlgorithmImpl()).new()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()
