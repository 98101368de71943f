"""Segment puller.

Pulls a zipped segment from blob storage into a local directory. Every failure
while opening or extracting the blob is classified:

* fatal failures are raised at once as ``UnrecoverableError`` and the
  destination directory is left as it was, partial files included;
* transient failures are retried with backoff; once the attempts run out the
  destination directory is deleted and ``SegmentLoadingError`` is raised, so a
  half-extracted segment is never mistaken for a complete one.
"""

import shutil
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from segment_puller_core.classification import (
    Classifier,
    FailureClass,
    default_classifier,
)
from segment_puller_core.exceptions import (
    BlobLocatorError,
    SegmentLoadingError,
    UnrecoverableError,
)
from segment_puller_core.locator import DEFAULT_STORAGE_ENDPOINT_SUFFIX, BlobLocator
from segment_puller_core.storage.protocol import ByteSourceProvider, StreamExtractor
from segment_puller_core.utils.retry import (
    RetryEngine,
    create_segment_pull_retry_engine,
)

# Get logger for this module
logger = structlog.get_logger(__name__)


class PullState(Enum):
    """States of a single pull."""

    OPENING = "opening"
    EXTRACTING = "extracting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED_FATAL = "failed_fatal"
    FAILED_EXHAUSTED = "failed_exhausted"


@dataclass(frozen=True)
class PullResult:
    """Outcome of a successful pull."""

    bytes_written: int
    attempts: int = 1
    locator: BlobLocator | None = None


class SegmentPuller:
    """Fetches segment archives and extracts them into local directories.

    The puller keeps no per-pull state, so one instance can serve concurrent
    pulls as long as its collaborators are safe for concurrent use.
    """

    def __init__(
        self,
        byte_source_provider: ByteSourceProvider,
        stream_extractor: StreamExtractor,
        classifier: Classifier = default_classifier,
        retry_engine: RetryEngine | None = None,
        endpoint_suffix: str = DEFAULT_STORAGE_ENDPOINT_SUFFIX,
    ) -> None:
        """Initialize the puller with its collaborators.

        Args:
            byte_source_provider: Opens blobs as binary streams.
            stream_extractor: Extracts archive streams into a directory.
            classifier: Maps pull failures to transient or fatal.
            retry_engine: Backoff policy for transient failures.
            endpoint_suffix: Storage endpoint suffix stripped from blob paths.
        """
        self.byte_source_provider = byte_source_provider
        self.stream_extractor = stream_extractor
        self.classifier = classifier
        self.retry_engine = retry_engine or create_segment_pull_retry_engine()
        self.endpoint_suffix = endpoint_suffix

    def pull(self, locator: BlobLocator, destination_dir: Path | str) -> PullResult:
        """Pull the segment at ``locator`` into ``destination_dir``.

        Args:
            locator: Remote location of the segment archive.
            destination_dir: Directory receiving the extracted files.

        Returns:
            The number of bytes extracted and the attempts it took.

        Raises:
            UnrecoverableError: The pull failed and retrying cannot help.
                ``destination_dir`` is left untouched.
            SegmentLoadingError: The segment stayed unobtainable after every
                attempt. ``destination_dir`` has been deleted unless
                ``directory_removed`` on the error is False.
        """
        destination = Path(destination_dir)
        log = logger.bind(
            container=locator.container,
            path=locator.path,
            destination_dir=str(destination),
        )

        try:
            target = locator.normalized(self.endpoint_suffix)
            destination.mkdir(parents=True, exist_ok=True)
        except (BlobLocatorError, OSError) as e:
            log.exception(
                "SEGMENT_PULL_FAILED_FATAL",
                state=PullState.FAILED_FATAL.value,
                phase=PullState.OPENING.value,
            )
            raise UnrecoverableError(e, locator) from e

        max_attempts = self.retry_engine.max_attempts
        attempt = 0
        last_error: Exception | None = None

        while attempt < max_attempts:
            attempt += 1
            state = PullState.OPENING
            try:
                stream = self.byte_source_provider.open(target.container, target.path)
                with closing(stream):
                    state = PullState.EXTRACTING
                    bytes_written = self.stream_extractor.extract_all(
                        stream, destination
                    )
            except Exception as e:
                try:
                    failure_class = self.classifier(e)
                except Exception as classify_error:
                    log.exception(
                        "SEGMENT_PULL_CLASSIFICATION_FAILED",
                        state=PullState.FAILED_FATAL.value,
                        phase=state.value,
                        attempt=attempt,
                        error=str(e),
                    )
                    raise UnrecoverableError(classify_error, target) from classify_error

                if failure_class is not FailureClass.TRANSIENT:
                    log.exception(
                        "SEGMENT_PULL_FAILED_FATAL",
                        state=PullState.FAILED_FATAL.value,
                        phase=state.value,
                        attempt=attempt,
                        error=str(e),
                    )
                    raise UnrecoverableError(e, target) from e

                last_error = e
                log.warning(
                    "SEGMENT_PULL_ATTEMPT_FAILED",
                    phase=state.value,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=str(e),
                )
                if attempt < max_attempts:
                    delay = self.retry_engine.wait(attempt - 1)
                    log.debug(
                        "SEGMENT_PULL_RETRYING",
                        state=PullState.RETRYING.value,
                        attempt=attempt + 1,
                        delay=delay,
                    )
                continue

            log.info(
                "SEGMENT_PULLED",
                state=PullState.SUCCEEDED.value,
                bytes_written=bytes_written,
                attempts=attempt,
            )
            return PullResult(
                bytes_written=bytes_written, attempts=attempt, locator=target
            )

        log.error(
            "SEGMENT_PULL_RETRIES_EXHAUSTED",
            state=PullState.FAILED_EXHAUSTED.value,
            attempts=attempt,
            error=str(last_error),
        )
        removed = self._purge(destination)
        message = (
            f"Unable to pull segment {target} after {attempt} attempt(s): "
            f"{last_error!s}"
        )
        if not removed:
            message += f" (output directory {destination} could not be removed)"
        raise SegmentLoadingError(
            message, target, attempt, directory_removed=removed
        ) from last_error

    def _purge(self, destination: Path) -> bool:
        """Delete the destination directory and everything extracted into it.

        Returns:
            False if the directory could not be removed.
        """
        try:
            shutil.rmtree(destination)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(
                "SEGMENT_OUTPUT_DIRECTORY_CLEANUP_FAILED",
                destination_dir=str(destination),
                error=str(e),
            )
            return False
        return True
