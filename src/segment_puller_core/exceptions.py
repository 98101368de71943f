"""Standardized exceptions for the segment puller.

Only ``UnrecoverableError`` and ``SegmentLoadingError`` ever escape
``SegmentPuller.pull``; the remaining types describe where a failure
originated so the classifier can decide whether a retry is meaningful.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from segment_puller_core.locator import BlobLocator


class SegmentPullerError(Exception):
    """Base exception for all segment puller errors."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """Initialize the error with a message and optional error code.

        Args:
            message: Human-readable error message.
            error_code: Optional error code for programmatic handling.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ConfigurationError(SegmentPullerError):
    """Raised when there are configuration-related errors."""

    def __init__(self, message: str, component: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message describing the configuration issue.
            component: Optional component name where the error occurred.
        """
        super().__init__(message, "CONFIG_ERROR")
        self.component = component


class BlobLocatorError(SegmentPullerError):
    """Raised when a blob locator or its URI cannot be constructed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize locator error.

        Args:
            message: Error message describing the malformed locator.
            field: Optional locator field that failed validation.
        """
        super().__init__(message, "LOCATOR_ERROR")
        self.field = field


class BlobStorageError(SegmentPullerError):
    """Raised when the storage backend fails while opening or reading a blob."""

    def __init__(
        self, message: str, container: str | None = None, path: str | None = None
    ) -> None:
        """Initialize storage error.

        Args:
            message: Error message describing the storage issue.
            container: Optional container of the blob being read.
            path: Optional path of the blob being read.
        """
        super().__init__(message, "STORAGE_ERROR")
        self.container = container
        self.path = path


class UnsafeArchiveEntryError(SegmentPullerError):
    """Raised when an archive entry would be written outside its target directory."""

    def __init__(self, entry_name: str) -> None:
        """Initialize the error with the offending entry name.

        Args:
            entry_name: Name of the archive entry as stored in the archive.
        """
        super().__init__(
            f"Archive entry escapes destination directory: {entry_name}",
            "UNSAFE_ARCHIVE_ENTRY",
        )
        self.entry_name = entry_name


class UnrecoverableError(SegmentPullerError):
    """Raised when a pull failed in a way that retrying cannot fix.

    The destination directory is left exactly as it was when the failure
    happened.
    """

    def __init__(
        self, cause: BaseException, locator: "BlobLocator | None" = None
    ) -> None:
        """Initialize the error wrapping the original failure.

        Args:
            cause: The underlying exception.
            locator: Optional locator of the segment being pulled.
        """
        super().__init__(
            f"Unrecoverable error pulling segment: {cause!s}", "UNRECOVERABLE_ERROR"
        )
        self.cause = cause
        self.locator = locator


class SegmentLoadingError(SegmentPullerError):
    """Raised when a segment stayed unobtainable after every retry attempt.

    The destination directory no longer exists when this is raised, unless
    ``directory_removed`` is False because deleting it failed. The whole pull
    may be retried later.
    """

    def __init__(
        self,
        message: str,
        locator: "BlobLocator | None" = None,
        attempts: int = 0,
        *,
        directory_removed: bool = True,
    ) -> None:
        """Initialize segment loading error.

        Args:
            message: Error message describing the last transient failure.
            locator: Optional locator of the segment being pulled.
            attempts: Number of open and extract attempts made.
            directory_removed: Whether the destination directory was deleted.
        """
        super().__init__(message, "SEGMENT_LOADING_ERROR")
        self.locator = locator
        self.attempts = attempts
        self.directory_removed = directory_removed
