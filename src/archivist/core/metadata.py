"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/metadata.py
Media-type detection and capture-date extraction.

- Media type is decided from the file header (magic numbers) via `filetype`,
  never from the extension.
- Capture date comes from embedded metadata via `hachoir`. When no date can
  be read from the metadata, the file modification time is used instead.
"""

import logging
from datetime import datetime
from pathlib import Path

import filetype
from hachoir.core import config as hachoir_config
from hachoir.metadata import extractMetadata
from hachoir.parser import createParser

from archivist.core.errors import MetadataError
from archivist.core.interfaces import MetadataOracle
from archivist.core.models import MediaInfo

logger = logging.getLogger(__name__)

# Suppress hachoir warnings to keep console output clean
hachoir_config.quiet = True


class MetadataOracleImpl(MetadataOracle):
    """Reads file headers and embedded metadata from disk."""

    def is_media_file(self, path: str) -> bool:
        try:
            return filetype.is_image(path) or filetype.is_video(path)
        except OSError as e:
            raise MetadataError(f"could not open file to determine file type: {e}", path) from e

    def capture_date(self, path: str) -> datetime:
        try:
            modified = datetime.fromtimestamp(Path(path).stat().st_mtime)
        except OSError as e:
            raise MetadataError(f"failed to open or stat file: {e}", path) from e

        embedded = self._embedded_date(path)
        if embedded is not None:
            return embedded

        logger.debug(f"No embedded capture date for {path}, using modification time")
        return modified

    @staticmethod
    def _embedded_date(path: str):
        """Returns the metadata creation date or None."""
        try:
            parser = createParser(path)
        except Exception as e:
            logger.debug(f"Failed to create parser for {path}: {e}")
            return None

        if not parser:
            logger.debug(f"Unable to parse file for capture date: {path}")
            return None

        with parser:
            try:
                metadata = extractMetadata(parser)
            except Exception as e:
                logger.debug(f"Metadata extraction error for {path}: {e}")
                return None

        if not metadata:
            return None
        for created in metadata.getValues("creation_date"):
            if isinstance(created, datetime):
                return created
        return None

    def describe(self, path: str) -> MediaInfo:
        """Collects media type and capture date, recording the first failure."""
        info = MediaInfo(path=path)
        try:
            info.is_media = self.is_media_file(path)
        except MetadataError as e:
            info.error = str(e)
            info.failed_stage = "type"
            return info
        if not info.is_media:
            return info
        try:
            info.capture_date = self.capture_date(path)
        except MetadataError as e:
            info.error = str(e)
            info.failed_stage = "date"
        return info
