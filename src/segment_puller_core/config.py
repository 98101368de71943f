"""Segment puller configuration.

Settings are read from ``SEGMENT_PULLER_*`` environment variables with
environ-config; command line ``--flag value`` arguments override them.
"""

import os
from collections.abc import Mapping

import environ

from segment_puller_core.exceptions import ConfigurationError
from segment_puller_core.locator import DEFAULT_STORAGE_ENDPOINT_SUFFIX

ENV_PREFIX = "SEGMENT_PULLER"


@environ.config(prefix=ENV_PREFIX)
class PullerConfig:
    """Configuration for segment pulls."""

    source: str = environ.var(
        default="s3", help="Byte source to read segments from (s3 or file)"
    )
    endpoint_suffix: str = environ.var(
        default=DEFAULT_STORAGE_ENDPOINT_SUFFIX,
        help="Storage endpoint suffix stripped from prefixed blob paths",
    )

    # Retry policy
    max_retries: int = environ.var(
        default=2, converter=int, help="Retries after the first failed attempt"
    )
    base_delay: float = environ.var(
        default=1.0, converter=float, help="Initial backoff in seconds"
    )
    max_delay: float = environ.var(
        default=60.0, converter=float, help="Maximum backoff in seconds"
    )
    exponential_base: float = environ.var(
        default=2.0, converter=float, help="Base for exponential backoff"
    )
    jitter: bool = environ.bool_var(default=True, help="Add random jitter to backoff")

    # S3 source
    s3_region: str | None = environ.var(default=None, help="S3 region")
    s3_endpoint_url: str | None = environ.var(
        default=None, help="S3 endpoint URL (e.g., LocalStack)"
    )

    # File source
    file_base_dir: str | None = environ.var(
        default=None, help="Base directory holding <container>/<path> blobs"
    )

    log_level: str = environ.var(default="INFO", help="Log level")
    dev_mode: bool = environ.bool_var(
        default=False, help="Enable development mode logging"
    )


def _args_to_environ(args: list[str]) -> dict[str, str]:
    """Translate ``--some-flag value`` arguments into environment variable names."""
    values: dict[str, str] = {}
    index = 0
    while index < len(args):
        arg = args[index]
        if not arg.startswith("--") or len(arg) == 2:  # noqa: PLR2004
            raise ConfigurationError(f"Unexpected argument: {arg}", "cli")
        name, sep, value = arg[2:].partition("=")
        if not sep:
            if index + 1 < len(args) and not args[index + 1].startswith("--"):
                value = args[index + 1]
                index += 1
            else:
                value = "true"
        key = f"{ENV_PREFIX}_{name.replace('-', '_').upper()}"
        values[key] = value
        index += 1
    return values


def create_puller_config(
    args: list[str] | None = None, env: Mapping[str, str] | None = None
) -> PullerConfig:
    """Create a PullerConfig from command line arguments and environment variables.

    Args:
        args: ``--flag value`` arguments taking precedence over the environment.
        env: Environment to read from. If None, uses os.environ.

    Returns:
        PullerConfig instance.

    Raises:
        ConfigurationError: If an argument is malformed or a value is invalid.
    """
    merged = dict(os.environ if env is None else env)
    merged.update(_args_to_environ(args or []))
    try:
        return environ.to_config(PullerConfig, environ=merged)
    except (ValueError, environ.MissingEnvValueError) as e:
        raise ConfigurationError(str(e), "config") from e
