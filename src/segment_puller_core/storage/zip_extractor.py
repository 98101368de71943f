"""Zip archive extraction.

The archive stream is first copied to a temporary file because the zip
central directory sits at the end of the archive and ``zipfile`` needs random
access. Reading the stream is where mid-stream storage failures surface; they
propagate unchanged so the puller can classify them.
"""

import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import structlog

from segment_puller_core.exceptions import UnsafeArchiveEntryError

# Get logger for this module
logger = structlog.get_logger(__name__)


@dataclass
class ZipStreamExtractor:
    """Extracts zip archive streams into a directory."""

    chunk_size: int = 1024 * 1024

    def _resolve_target(self, destination: Path, entry_name: str) -> Path:
        target = (destination / entry_name).resolve()
        if not target.is_relative_to(destination):
            raise UnsafeArchiveEntryError(entry_name)
        return target

    def extract_all(self, stream: BinaryIO, destination_dir: Path) -> int:
        """Extract every entry of the zip ``stream`` into ``destination_dir``.

        An empty stream is treated as an empty archive.

        Returns:
            Total size in bytes of the files written.
        """
        destination = Path(destination_dir).resolve()

        with tempfile.TemporaryFile() as spool:
            shutil.copyfileobj(stream, spool, self.chunk_size)
            archive_size = spool.tell()
            if archive_size == 0:
                logger.debug("EMPTY_ARCHIVE_NOTHING_TO_EXTRACT")
                return 0
            spool.seek(0)

            logger.debug("CONTENT_WRITTEN_TO_TEMP_FILE", size=archive_size)

            # Later entries with the same name overwrite earlier ones on disk
            sizes: dict[Path, int] = {}
            with zipfile.ZipFile(spool) as archive:
                for info in archive.infolist():
                    target = self._resolve_target(destination, info.filename)
                    if info.is_dir():
                        target.mkdir(parents=True, exist_ok=True)
                        continue

                    target.parent.mkdir(parents=True, exist_ok=True)
                    with archive.open(info) as src, target.open("wb") as dst:
                        shutil.copyfileobj(src, dst, self.chunk_size)
                        written = dst.tell()
                    sizes[target] = written

                    logger.debug(
                        "ZIP_FILE_EXTRACTED", filename=info.filename, size=written
                    )

        return sum(sizes.values())
