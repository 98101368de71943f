"""Tests for the segment puller command line."""

import sys
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from botocore.exceptions import ProfileNotFound

from segment_puller_app.main import (
    EXIT_OK,
    EXIT_RETRY_LATER,
    EXIT_UNRECOVERABLE,
    generate_run_id,
    main,
    pull_command,
)


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from reconfiguring logging during tests."""
    with patch("segment_puller_app.main.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def blob_dir(
    tmp_path: Path, make_zip: Callable[[dict[str, bytes]], bytes]
) -> Path:
    """Create a file-source blob directory holding one segment."""
    blob = tmp_path / "blobs" / "segments" / "wiki" / "index.zip"
    blob.parent.mkdir(parents=True)
    blob.write_bytes(make_zip({"version.bin": b"\x00\x00\x00\x09"}))
    return tmp_path / "blobs"


def _file_source_args(blob_dir: Path) -> list[str]:
    return ["--source", "file", "--file-base-dir", str(blob_dir)]


class TestPullCommand:
    """Test the pull command."""

    def test_pull_succeeds(
        self,
        blob_dir: Path,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        no_logging_setup,
    ) -> None:
        """Test a present segment is pulled and reported."""
        destination = tmp_path / "out"

        code = pull_command(
            ["segments", "wiki/index.zip", str(destination), *_file_source_args(blob_dir)]
        )

        assert code == EXIT_OK
        assert (destination / "version.bin").read_bytes() == b"\x00\x00\x00\x09"
        assert "4 bytes" in capsys.readouterr().out
        no_logging_setup.assert_called_once_with(log_level="INFO", dev_mode=False)

    def test_missing_positional_arguments(self) -> None:
        """Test the command requires container, blob path and destination."""
        assert pull_command(["segments", "wiki/index.zip"]) == EXIT_UNRECOVERABLE

    def test_missing_blob_asks_for_retry(self, blob_dir: Path, tmp_path: Path) -> None:
        """Test an unavailable blob exits with the retry-later code."""
        destination = tmp_path / "out"

        code = pull_command(
            [
                "segments",
                "wiki/missing.zip",
                str(destination),
                *_file_source_args(blob_dir),
                "--max-retries",
                "0",
            ]
        )

        assert code == EXIT_RETRY_LATER
        assert not destination.exists()

    def test_invalid_locator_is_unrecoverable(
        self, blob_dir: Path, tmp_path: Path
    ) -> None:
        """Test a malformed container exits with the unrecoverable code."""
        code = pull_command(
            ["", "wiki/index.zip", str(tmp_path / "out"), *_file_source_args(blob_dir)]
        )

        assert code == EXIT_UNRECOVERABLE

    def test_corrupt_archive_is_unrecoverable(
        self, blob_dir: Path, tmp_path: Path
    ) -> None:
        """Test an archive that cannot be read keeps the destination."""
        (blob_dir / "segments" / "wiki" / "index.zip").write_bytes(b"not a zip")
        destination = tmp_path / "out"

        code = pull_command(
            ["segments", "wiki/index.zip", str(destination), *_file_source_args(blob_dir)]
        )

        assert code == EXIT_UNRECOVERABLE
        assert destination.exists()

    def test_bad_configuration(self, tmp_path: Path) -> None:
        """Test invalid options exit with the unrecoverable code."""
        code = pull_command(
            ["segments", "wiki/index.zip", str(tmp_path), "--source", "ftp"]
        )

        assert code == EXIT_UNRECOVERABLE

    def test_aws_setup_error_is_unrecoverable(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test a failure building the S3 client exits with the unrecoverable code."""
        with patch(
            "segment_puller_app.main.create_segment_puller",
            side_effect=ProfileNotFound(profile="missing"),
        ):
            code = pull_command(["segments", "wiki/index.zip", str(tmp_path)])

        assert code == EXIT_UNRECOVERABLE
        assert "missing" in capsys.readouterr().out


class TestMain:
    """Test the main entry point."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints the version and exits cleanly."""
        with patch.object(sys, "argv", ["segment-puller", "--version"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_no_command_shows_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test running without a command prints usage and fails."""
        with patch.object(sys, "argv", ["segment-puller"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert "Usage:" in capsys.readouterr().out

    def test_pull_dispatch(self, blob_dir: Path, tmp_path: Path) -> None:
        """Test the pull command exit code becomes the process exit code."""
        argv = [
            "segment-puller",
            "pull",
            "segments",
            "wiki/index.zip",
            str(tmp_path / "out"),
            *_file_source_args(blob_dir),
        ]
        with patch.object(sys, "argv", argv):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == EXIT_OK


def test_generate_run_id() -> None:
    """Test run ids carry the pull prefix and a timestamp."""
    run_id = generate_run_id()

    assert run_id.startswith("pull_")
    assert len(run_id) == len("pull_20240101000000")
