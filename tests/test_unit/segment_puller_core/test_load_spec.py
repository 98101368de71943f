"""Tests for segment load specs."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import Mock

import pytest

from segment_puller_core.exceptions import ConfigurationError, UnrecoverableError
from segment_puller_core.load_spec import LOAD_SPEC_TYPE, SegmentLoadSpec
from segment_puller_core.locator import BlobLocator
from segment_puller_core.puller import SegmentPuller
from segment_puller_core.storage import FileByteSourceProvider, ZipStreamExtractor
from segment_puller_core.utils.retry import RetryEngine


class TestSegmentLoadSpec:
    """Test parsing and using load specs."""

    def test_from_dict(self) -> None:
        """Test a well formed load spec is parsed."""
        spec = SegmentLoadSpec.from_dict(
            {"type": LOAD_SPEC_TYPE, "containerName": "segments", "blobPath": "a/b.zip"}
        )

        assert spec.container_name == "segments"
        assert spec.blob_path == "a/b.zip"
        assert spec.locator == BlobLocator("segments", "a/b.zip")

    def test_to_dict_matches_input(self) -> None:
        """Test serializing returns the original mapping."""
        raw = {"type": LOAD_SPEC_TYPE, "containerName": "segments", "blobPath": "a/b.zip"}

        assert SegmentLoadSpec.from_dict(raw).to_dict() == raw

    def test_wrong_type_rejected(self) -> None:
        """Test load specs of another type are rejected."""
        with pytest.raises(ConfigurationError, match="Unsupported load spec type"):
            SegmentLoadSpec.from_dict(
                {"type": "hdfs", "containerName": "segments", "blobPath": "a/b.zip"}
            )

    def test_missing_keys_rejected(self) -> None:
        """Test missing keys are listed in the error."""
        with pytest.raises(ConfigurationError, match="containerName, blobPath"):
            SegmentLoadSpec.from_dict({"type": LOAD_SPEC_TYPE})

    def test_invalid_locator_is_unrecoverable(self, tmp_path: Path) -> None:
        """Test an unusable location fails without calling the puller."""
        puller = Mock()
        spec = SegmentLoadSpec(container_name="", blob_path="a/b.zip")

        with pytest.raises(UnrecoverableError):
            spec.load_segment(puller, tmp_path)

        puller.pull.assert_not_called()

    def test_load_segment(
        self,
        make_zip: Callable[[dict[str, bytes]], bytes],
        retry_engine: RetryEngine,
        tmp_path: Path,
    ) -> None:
        """Test a load spec pulls its segment through the puller."""
        blob = tmp_path / "blobs" / "segments" / "ds" / "v1" / "0" / "index.zip"
        blob.parent.mkdir(parents=True)
        blob.write_bytes(make_zip({"meta.smoosh": b"meta", "00000.smoosh": b"data!"}))
        puller = SegmentPuller(
            FileByteSourceProvider(str(tmp_path / "blobs")),
            ZipStreamExtractor(),
            retry_engine=retry_engine,
        )
        spec = SegmentLoadSpec(
            container_name="segments", blob_path="s3.amazonaws.com/ds/v1/0/index.zip"
        )

        result = spec.load_segment(puller, tmp_path / "out")

        assert result.bytes_written == 9
        assert result.locator == BlobLocator("segments", "ds/v1/0/index.zip")
        assert (tmp_path / "out" / "00000.smoosh").read_bytes() == b"data!"
