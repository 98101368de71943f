"""S3 byte source implementation.

This module provides the S3ByteSourceProvider class for opening S3 objects as
binary streams. Every botocore failure, whether raised when the object is
requested or while its body is being read, is re-raised as a
``BlobStorageError`` so the puller can classify it as a storage condition.
"""

import io
import os
from dataclasses import dataclass
from typing import Any, BinaryIO, cast

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from segment_puller_core.exceptions import BlobLocatorError, BlobStorageError

# Get logger for this module
logger = structlog.get_logger(__name__)


class MissingAWSCredentialsError(ValueError):
    """Raised when AWS credentials are required but not provided."""

    def __init__(self) -> None:
        """Initialize the error with a descriptive message."""
        super().__init__(
            "AWS credentials are required when using a custom endpoint. "
            "Please set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY environment variables."
        )


class S3BlobStream(io.RawIOBase):
    """Readable stream over an S3 object body."""

    def __init__(self, body: Any, container: str, path: str) -> None:
        """Wrap a botocore ``StreamingBody``.

        Args:
            body: The ``Body`` of a ``get_object`` response.
            container: Bucket the object was read from.
            path: Key of the object.
        """
        super().__init__()
        self._body = body
        self.container = container
        self.path = path

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        """Read up to ``len(buffer)`` bytes of the object body into ``buffer``."""
        view = memoryview(buffer).cast("B")
        try:
            chunk = self._body.read(len(view))
        except BotoCoreError as e:
            raise BlobStorageError(
                f"Error reading s3://{self.container}/{self.path}: {e!s}",
                self.container,
                self.path,
            ) from e
        size = len(chunk)
        view[:size] = chunk
        return size

    def close(self) -> None:
        if not self.closed:
            try:
                self._body.close()
            finally:
                super().close()


@dataclass
class S3ByteSourceProvider:
    """Opens S3 objects as binary streams."""

    region: str | None = None
    endpoint_url: str | None = None
    s3_client: Any = None

    def __post_init__(self) -> None:
        """Create the S3 client unless one was injected."""
        if self.s3_client is not None:
            return

        # Use AWS_REGION environment variable if region is not specified
        if self.region is None:
            self.region = os.getenv("AWS_REGION", "eu-west-2")

        profile_name = os.getenv("AWS_PROFILE")
        session = (
            boto3.session.Session(profile_name=profile_name)
            if profile_name
            else boto3.session.Session()
        )
        if self.endpoint_url:
            # Custom endpoints (LocalStack, MinIO) need explicit credentials
            aws_access_key_id = os.getenv("AWS_ACCESS_KEY_ID")
            aws_secret_access_key = os.getenv("AWS_SECRET_ACCESS_KEY")

            if not aws_access_key_id or not aws_secret_access_key:
                raise MissingAWSCredentialsError

            self.s3_client = session.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                aws_access_key_id=aws_access_key_id,
                aws_secret_access_key=aws_secret_access_key,
            )
        else:
            self.s3_client = session.client("s3", region_name=self.region)

    def open(self, container: str, path: str) -> BinaryIO:
        """Request the object and return a stream over its body."""
        if not container or not path:
            raise BlobLocatorError(
                f"Cannot address s3://{container}/{path}: container and path are required"
            )

        logger.debug("S3_OBJECT_OPENING", s3_bucket=container, s3_key=path)
        try:
            response = self.s3_client.get_object(Bucket=container, Key=path)
        except ParamValidationError as e:
            # Malformed bucket names and keys are rejected client side
            raise BlobLocatorError(
                f"Invalid S3 location s3://{container}/{path}: {e!s}"
            ) from e
        except (ClientError, BotoCoreError) as e:
            raise BlobStorageError(
                f"Error opening s3://{container}/{path}: {e!s}", container, path
            ) from e

        return cast("BinaryIO", S3BlobStream(response["Body"], container, path))
