"""Segment puller core.

Pulls zipped segments from blob storage into local directories, retrying
transient storage failures and purging partial output once retries run out.
"""

from .classification import (
    FailureClass,
    default_classifier,
    make_classifier,
)
from .exceptions import (
    BlobLocatorError,
    BlobStorageError,
    ConfigurationError,
    SegmentLoadingError,
    SegmentPullerError,
    UnrecoverableError,
    UnsafeArchiveEntryError,
)
from .locator import DEFAULT_STORAGE_ENDPOINT_SUFFIX, BlobLocator
from .puller import PullResult, PullState, SegmentPuller

__all__ = [
    "DEFAULT_STORAGE_ENDPOINT_SUFFIX",
    "BlobLocator",
    "BlobLocatorError",
    "BlobStorageError",
    "ConfigurationError",
    "FailureClass",
    "PullResult",
    "PullState",
    "SegmentLoadingError",
    "SegmentPuller",
    "SegmentPullerError",
    "UnrecoverableError",
    "UnsafeArchiveEntryError",
    "default_classifier",
    "make_classifier",
]
