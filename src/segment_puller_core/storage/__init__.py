"""Blob access and archive extraction.

This module provides the byte source providers the puller opens blobs with,
including S3 and local file storage, and the zip stream extractor.
"""

from .file_byte_source import FileByteSourceProvider
from .protocol import ByteSourceProvider, StreamExtractor
from .s3_byte_source import S3BlobStream, S3ByteSourceProvider
from .zip_extractor import ZipStreamExtractor

__all__ = [
    "ByteSourceProvider",
    "FileByteSourceProvider",
    "S3BlobStream",
    "S3ByteSourceProvider",
    "StreamExtractor",
    "ZipStreamExtractor",
]
