"""Local file system byte source implementation.

Blobs are read from ``<base_dir>/<container>/<path>``. Useful for local
development and for exercising the puller without an object store.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import structlog

from segment_puller_core.exceptions import BlobLocatorError, BlobStorageError

# Get logger for this module
logger = structlog.get_logger(__name__)


@dataclass
class FileByteSourceProvider:
    """Opens blobs stored as files under a base directory."""

    base_dir: str

    def _resolve(self, container: str, path: str) -> Path:
        if not container or not path:
            raise BlobLocatorError(
                f"Cannot address {container}/{path}: container and path are required"
            )
        base = Path(self.base_dir).resolve()
        container_dir = (base / container).resolve()
        target = (container_dir / path).resolve()
        if not container_dir.is_relative_to(base) or not target.is_relative_to(
            container_dir
        ):
            raise BlobLocatorError(f"Blob path escapes container: {container}/{path}")
        return target

    def open(self, container: str, path: str) -> BinaryIO:
        """Open the blob file for reading."""
        target = self._resolve(container, path)
        logger.debug("FILE_BLOB_OPENING", container=container, path=path)
        try:
            return target.open("rb")
        except OSError as e:
            raise BlobStorageError(
                f"Error opening {container}/{path}: {e!s}", container, path
            ) from e
