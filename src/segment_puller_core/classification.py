"""Failure classification for segment pulls.

A classifier maps any exception raised while opening or extracting a blob to
``FailureClass.TRANSIENT`` (retry, then purge the output directory) or
``FailureClass.FATAL`` (surface immediately, keep the output directory).
"""

from collections.abc import Callable, Iterator
from enum import Enum

from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import HTTPClientError, IncompleteReadError

from segment_puller_core.exceptions import (
    BlobLocatorError,
    BlobStorageError,
    UnsafeArchiveEntryError,
)


class FailureClass(Enum):
    """How a pull failure is handled."""

    TRANSIENT = "transient"
    FATAL = "fatal"


Classifier = Callable[[BaseException], FailureClass]

DEFAULT_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    BlobStorageError,
    BotoConnectionError,
    HTTPClientError,
    IncompleteReadError,
)

DEFAULT_FATAL_ERRORS: tuple[type[BaseException], ...] = (
    BlobLocatorError,
    UnsafeArchiveEntryError,
)


def iter_causes(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` followed by its chained causes, each at most once."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def make_classifier(
    transient: tuple[type[BaseException], ...] = DEFAULT_TRANSIENT_ERRORS,
    fatal: tuple[type[BaseException], ...] = DEFAULT_FATAL_ERRORS,
) -> Classifier:
    """Build a classifier from exception types.

    The exception chain is walked from the outermost error inwards. The first
    link matching ``fatal`` or ``transient`` decides; a fatal match on a link
    wins over a transient match on the same link. Errors matching neither are
    fatal.

    Args:
        transient: Exception types treated as transient storage conditions.
        fatal: Exception types that are always fatal.

    Returns:
        A classifier function.
    """

    def classify(error: BaseException) -> FailureClass:
        for link in iter_causes(error):
            if isinstance(link, fatal):
                return FailureClass.FATAL
            if isinstance(link, transient):
                return FailureClass.TRANSIENT
        return FailureClass.FATAL

    return classify


default_classifier: Classifier = make_classifier()
