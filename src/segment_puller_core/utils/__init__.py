"""Shared utilities for the segment puller."""

from .retry import (
    RetryConfig,
    RetryEngine,
    create_retry_engine,
    create_segment_pull_retry_engine,
)

__all__ = [
    "RetryConfig",
    "RetryEngine",
    "create_retry_engine",
    "create_segment_pull_retry_engine",
]
