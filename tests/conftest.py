"""PyTest configuration and shared test fixtures.

This module provides fixtures shared by the segment puller test suites.
"""

import io
import logging
import zipfile
from collections.abc import Callable, Generator

import pytest
import structlog

from segment_puller_core.utils.retry import RetryConfig, RetryEngine


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    """Return a function building an in-memory zip archive from name/content pairs."""

    def _make_zip(entries: dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return buffer.getvalue()

    return _make_zip


@pytest.fixture
def sleeps() -> list[float]:
    """Collect the backoff delays a retry engine would have slept for."""
    return []


@pytest.fixture
def retry_engine(sleeps: list[float]) -> RetryEngine:
    """Create a deterministic retry engine allowing three attempts."""
    config = RetryConfig(max_retries=2, base_delay=0.01, jitter=False)
    return RetryEngine(config, sleep=sleeps.append)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore root logger state and structlog defaults after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
