"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

import pytest

from snapcatalog.core.codec import BackupPathCodec
from snapcatalog.core.exceptions import StorageNotFoundError, TransferError
from snapcatalog.core.models import ArtifactKind, BackupPath
from snapcatalog.core.ports import DEFAULT_DOWNLOAD_CONCURRENCY, ProgressCallback


ROOT = "s3://backups/prod"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "storage: Storage adapters (s3, filesystem)")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class FakeRemoteFileSystem:
    """In-memory RemoteFileSystem.

    Keys are kept in a dict; list_under honours prefix and marker the way S3
    does. Setting reverse_listing yields keys in descending order, to check
    callers do not rely on the store's order.
    """

    def __init__(self, root: str = ROOT) -> None:
        self.root = root
        self.objects: dict[str, bytes] = {}
        self.list_calls: list[tuple[str, str | None, str | None]] = []
        self.download_calls: list[tuple[str, Path, int]] = []
        self.reverse_listing = False
        self.list_error: TransferError | None = None
        self.download_error: TransferError | None = None

    def root_prefix(self) -> str:
        return self.root

    def list_under(
        self,
        prefix: str,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> Iterator[str]:
        self.list_calls.append((prefix, delimiter, marker))
        if self.list_error is not None:
            raise self.list_error
        keys = sorted(
            key
            for key in self.objects
            if key.startswith(prefix) and (marker is None or key > marker)
        )
        yield from reversed(keys) if self.reverse_listing else keys

    def download(
        self,
        source: str,
        dest: Path,
        progress: ProgressCallback,
        concurrency: int = DEFAULT_DOWNLOAD_CONCURRENCY,
    ) -> None:
        self.download_calls.append((source, dest, concurrency))
        if self.download_error is not None:
            raise self.download_error
        if source not in self.objects:
            raise StorageNotFoundError(f"Object not found: {source}", source=source)
        body = self.objects[source]
        dest.write_bytes(body)
        progress(len(body), len(body))

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        self.objects[dest] = local.read_bytes()


@pytest.fixture
def fake_remote() -> FakeRemoteFileSystem:
    """Empty in-memory remote store rooted at ROOT."""
    return FakeRemoteFileSystem()


@pytest.fixture
def codec() -> BackupPathCodec:
    """Codec for cluster 'orders', node 'node-1'."""
    return BackupPathCodec(cluster="orders", node="node-1")


@pytest.fixture
def put_manifest(
    fake_remote: FakeRemoteFileSystem, codec: BackupPathCodec
) -> Callable[..., BackupPath]:
    """Store a V2 manifest in fake_remote and return its path (with key)."""

    def put(
        when: datetime,
        body: bytes = b"{}",
        kind: ArtifactKind = ArtifactKind.META_V2,
        file_name: str | None = None,
    ) -> BackupPath:
        name = file_name or f"meta_v2_{when:%Y%m%d%H%M}.json"
        path = codec.new_path(kind, when, name)
        key = codec.encode(path, fake_remote.root_prefix())
        fake_remote.objects[key] = body
        return path.with_remote_key(key)

    return put
