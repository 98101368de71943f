"""Factory wiring a SegmentPuller from configuration."""

from collections.abc import Callable

import structlog

from segment_puller_core.classification import Classifier, default_classifier
from segment_puller_core.config import PullerConfig
from segment_puller_core.exceptions import ConfigurationError
from segment_puller_core.puller import SegmentPuller
from segment_puller_core.storage import (
    ByteSourceProvider,
    FileByteSourceProvider,
    S3ByteSourceProvider,
    ZipStreamExtractor,
)
from segment_puller_core.utils.retry import RetryConfig, RetryEngine

# Get logger for this module
logger = structlog.get_logger(__name__)


def create_byte_source_provider(config: PullerConfig) -> ByteSourceProvider:
    """Create the byte source provider selected by ``config.source``.

    Raises:
        ConfigurationError: If the source is unknown or incompletely configured.
    """
    if config.source == "s3":
        return S3ByteSourceProvider(
            region=config.s3_region, endpoint_url=config.s3_endpoint_url
        )
    if config.source == "file":
        if not config.file_base_dir:
            raise ConfigurationError(
                "file_base_dir is required for the file source", "file"
            )
        return FileByteSourceProvider(config.file_base_dir)
    raise ConfigurationError(f"Unknown byte source: {config.source}", "source")


def create_retry_engine_from_config(
    config: PullerConfig, sleep: Callable[[float], None] | None = None
) -> RetryEngine:
    """Create the retry engine described by ``config``.

    Raises:
        ConfigurationError: If the retry settings are invalid.
    """
    try:
        retry_config = RetryConfig(
            max_retries=config.max_retries,
            base_delay=config.base_delay,
            max_delay=config.max_delay,
            exponential_base=config.exponential_base,
            jitter=config.jitter,
        )
    except ValueError as e:
        raise ConfigurationError(str(e), "retry") from e
    if sleep is None:
        return RetryEngine(retry_config)
    return RetryEngine(retry_config, sleep=sleep)


def create_segment_puller(
    config: PullerConfig,
    *,
    byte_source_provider: ByteSourceProvider | None = None,
    classifier: Classifier = default_classifier,
) -> SegmentPuller:
    """Create a SegmentPuller from configuration.

    Args:
        config: Puller configuration.
        byte_source_provider: Overrides the provider selected by ``config``.
        classifier: Failure classifier for the puller.

    Returns:
        Configured SegmentPuller.
    """
    provider = byte_source_provider or create_byte_source_provider(config)
    retry_engine = create_retry_engine_from_config(config)

    logger.debug(
        "SEGMENT_PULLER_CREATED",
        source=config.source,
        max_attempts=retry_engine.max_attempts,
        endpoint_suffix=config.endpoint_suffix,
    )
    return SegmentPuller(
        byte_source_provider=provider,
        stream_extractor=ZipStreamExtractor(),
        classifier=classifier,
        retry_engine=retry_engine,
        endpoint_suffix=config.endpoint_suffix,
    )
