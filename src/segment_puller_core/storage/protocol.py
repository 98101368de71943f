"""Storage protocol definitions.

This module defines the two narrow capabilities the segment puller consumes:
opening a blob as a byte stream, and extracting such a stream into a
directory.
"""

from pathlib import Path
from typing import BinaryIO, Protocol


class ByteSourceProvider(Protocol):
    """Opens blobs as readable binary streams."""

    def open(self, container: str, path: str) -> BinaryIO:
        """Open the blob at ``container``/``path``.

        The caller owns the returned stream and must close it.

        Args:
            container: Container (bucket) holding the blob.
            path: Blob path inside the container.

        Returns:
            A readable binary stream positioned at the start of the blob.

        Raises:
            BlobStorageError: If the storage backend fails.
            BlobLocatorError: If the location cannot be addressed at all.
        """
        ...


class StreamExtractor(Protocol):
    """Extracts an archive stream into a directory."""

    def extract_all(self, stream: BinaryIO, destination_dir: Path) -> int:
        """Extract every entry of ``stream`` into ``destination_dir``.

        Args:
            stream: Readable binary stream holding the archive.
            destination_dir: Existing directory receiving the entries.

        Returns:
            Total number of bytes written to ``destination_dir``.
        """
        ...
