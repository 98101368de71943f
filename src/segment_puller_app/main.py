"""Command-line interface and main entry point.

This module provides the CLI for pulling a single segment from blob storage
into a local directory.
"""
# ruff: noqa: T201

import sys
from datetime import UTC, datetime

import structlog
from botocore.exceptions import BotoCoreError

from segment_puller_core.config import create_puller_config
from segment_puller_core.exceptions import (
    BlobLocatorError,
    ConfigurationError,
    SegmentLoadingError,
    UnrecoverableError,
)
from segment_puller_core.factory import create_segment_puller
from segment_puller_core.locator import BlobLocator
from segment_puller_core.observability import configure_logging, log_bind

# Get logger for this module
logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_UNRECOVERABLE = 1
EXIT_RETRY_LATER = 2

PULL_POSITIONAL_ARGS = 3


def generate_run_id() -> str:
    """Generate a unique run ID in the format ``pull_{timestamp}``."""
    timestamp = datetime.now(tz=UTC).strftime("%Y%m%d%H%M%S")
    return f"pull_{timestamp}"


def pull_command(args: list[str]) -> int:
    """Pull one segment into a local directory.

    Args:
        args: ``<container> <blob_path> <destination_dir>`` followed by options.

    Returns:
        Process exit code.
    """
    if len(args) < PULL_POSITIONAL_ARGS:
        print("Error: pull requires <container> <blob_path> <destination_dir>")
        return EXIT_UNRECOVERABLE

    container, blob_path, destination_dir = args[:PULL_POSITIONAL_ARGS]

    try:
        config = create_puller_config(args[PULL_POSITIONAL_ARGS:])
        configure_logging(log_level=config.log_level, dev_mode=config.dev_mode)
        puller = create_segment_puller(config)
    except (ConfigurationError, BotoCoreError, ValueError) as e:
        print(f"Error: {e!s}")
        return EXIT_UNRECOVERABLE

    with log_bind(run_id=generate_run_id()):
        try:
            locator = BlobLocator(container, blob_path)
            result = puller.pull(locator, destination_dir)
        except SegmentLoadingError as e:
            print(f"Error: {e!s} (retry later)")
            return EXIT_RETRY_LATER
        except (UnrecoverableError, BlobLocatorError) as e:
            print(f"Error: {e!s}")
            return EXIT_UNRECOVERABLE

    print(
        f"Pulled {result.locator} into {destination_dir}: "
        f"{result.bytes_written} bytes"
    )
    return EXIT_OK


def show_help() -> None:
    """Show help information for the CLI."""
    help_text = """
Segment Puller

Usage:
    segment-puller <command> [options]

Commands:
    pull <container> <blob_path> <destination_dir>
                       Pull a zipped segment and extract it into a directory
    --help, -h         Show this help message
    --version, -v      Show version information

Options for pull command:
    --source <type>               Byte source (s3, file)
    --file-base-dir <path>        Base directory for the file source
    --s3-region <region>          S3 region
    --s3-endpoint-url <url>       S3 endpoint URL (e.g., LocalStack)
    --endpoint-suffix <suffix>    Endpoint suffix stripped from blob paths
    --max-retries <n>             Retries after the first failed attempt
    --log-level <level>           Log level (DEBUG, INFO, WARNING, ERROR)
    --dev-mode                    Enable development mode

Exit codes:
    0  segment pulled
    1  unrecoverable error, do not retry
    2  segment unavailable, retry later

Examples:
    segment-puller pull segments wiki/2024-01-01/0/index.zip /tmp/segment
    segment-puller pull segments wiki/index.zip /tmp/seg --source file --file-base-dir ./blobs
"""
    print(help_text)


def main() -> None:
    """Main entry point for the CLI."""
    min_args = 2
    if len(sys.argv) < min_args:
        show_help()
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    if command == "pull":
        sys.exit(pull_command(args))
    elif command in ["--help", "-h", "help"]:
        show_help()
        sys.exit(0)
    elif command in ["--version", "-v", "version"]:
        print("segment-puller, version 0.1.0")
        sys.exit(0)
    else:
        show_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
