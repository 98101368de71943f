"""Blob locators and storage path normalization.

Segment descriptors written by older ingestion jobs store blob paths prefixed
with the storage endpoint suffix (``s3.amazonaws.com/path/to/index.zip``).
Those paths refer to the same blob as the bare path, so the prefix is removed
before the path reaches a byte source provider.
"""

from dataclasses import dataclass

from segment_puller_core.exceptions import BlobLocatorError

DEFAULT_STORAGE_ENDPOINT_SUFFIX = "s3.amazonaws.com"


def strip_endpoint_suffix(
    path: str, endpoint_suffix: str = DEFAULT_STORAGE_ENDPOINT_SUFFIX
) -> str:
    """Remove a leading storage endpoint suffix from a blob path.

    Args:
        path: Blob path, bare or prefixed with the endpoint suffix.
        endpoint_suffix: The endpoint suffix to strip.

    Returns:
        The bare blob path. Paths without the prefix are returned unchanged.
    """
    if not endpoint_suffix or not path.startswith(endpoint_suffix):
        return path
    remainder = path[len(endpoint_suffix) :]
    # Only a whole path component counts as the prefix
    if remainder and not remainder.startswith("/"):
        return path
    return remainder.lstrip("/")


@dataclass(frozen=True)
class BlobLocator:
    """Remote location of a segment archive."""

    container: str
    path: str

    def __post_init__(self) -> None:
        """Validate the locator fields."""
        if not self.container or not self.container.strip():
            raise BlobLocatorError("container must not be empty", "container")
        if not self.path or not self.path.strip():
            raise BlobLocatorError("path must not be empty", "path")
        if "/" in self.container:
            raise BlobLocatorError(
                f"container must not contain '/': {self.container}", "container"
            )

    def normalized(
        self, endpoint_suffix: str = DEFAULT_STORAGE_ENDPOINT_SUFFIX
    ) -> "BlobLocator":
        """Return an equivalent locator with the endpoint suffix prefix removed."""
        path = strip_endpoint_suffix(self.path, endpoint_suffix)
        if path == self.path:
            return self
        return BlobLocator(container=self.container, path=path)

    def __str__(self) -> str:
        """Return the locator as ``container/path``."""
        return f"{self.container}/{self.path}"
