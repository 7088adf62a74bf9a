"""Unit tests for port interfaces."""

from pathlib import Path

import pytest


@pytest.mark.core
@pytest.mark.tier(0)
def test_progress_callback_is_callable():
    """ProgressCallback should be importable as a type alias."""
    from snapcatalog.core.ports import ProgressCallback

    assert ProgressCallback is not None


@pytest.mark.core
@pytest.mark.tier(0)
@pytest.mark.parametrize("method", ["root_prefix", "list_under", "download", "upload"])
def test_remote_file_system_methods(method: str):
    """RemoteFileSystem should declare the storage operations."""
    from snapcatalog.core.ports import RemoteFileSystem

    assert hasattr(RemoteFileSystem, method)


@pytest.mark.core
@pytest.mark.tier(0)
def test_default_download_concurrency():
    """Downloads request ten parallel parts unless configured otherwise."""
    from snapcatalog.core.ports import DEFAULT_DOWNLOAD_CONCURRENCY

    assert DEFAULT_DOWNLOAD_CONCURRENCY == 10


@pytest.mark.core
@pytest.mark.tier(0)
def test_adapters_satisfy_remote_file_system(tmp_path: Path):
    """Both adapters and the test fake should satisfy the protocol."""
    from unittest.mock import MagicMock

    from snapcatalog.adapters.storage import FilesystemStorage, S3Storage
    from snapcatalog.core.ports import RemoteFileSystem

    assert isinstance(FilesystemStorage(tmp_path), RemoteFileSystem)
    assert isinstance(S3Storage("s3://bucket/root", client=MagicMock()), RemoteFileSystem)


@pytest.mark.core
@pytest.mark.tier(0)
def test_fake_satisfies_remote_file_system(fake_remote):
    """The in-memory fake used across tests should satisfy the protocol."""
    from snapcatalog.core.ports import RemoteFileSystem

    assert isinstance(fake_remote, RemoteFileSystem)


@pytest.mark.core
@pytest.mark.tier(0)
class TestNullProgressReporter:
    """Tests for NullProgressReporter."""

    def test_satisfies_protocol(self) -> None:
        """NullProgressReporter should implement ProgressReporter."""
        from snapcatalog.core.ports import NullProgressReporter, ProgressReporter

        assert isinstance(NullProgressReporter(), ProgressReporter)

    def test_callbacks_are_noops(self) -> None:
        """Callbacks accept (done, total) and return nothing."""
        from snapcatalog.core.ports import NullProgressReporter

        reporter = NullProgressReporter()
        callback = reporter.start_task("meta_v2.json", 100)

        assert callback(50, 100) is None
        reporter.finish_task("meta_v2.json")
