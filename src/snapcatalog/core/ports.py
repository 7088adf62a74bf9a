"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from pathlib import Path

ProgressCallback = Callable[[int, int], None]

# Parallel part downloads requested from the transport by default
DEFAULT_DOWNLOAD_CONCURRENCY = 10


@runtime_checkable
class RemoteFileSystem(Protocol):
    """Remote backup storage (S3, local filesystem)."""

    def root_prefix(self) -> str:
        """Configured backup root under which all artifact kinds are stored."""
        ...

    def list_under(
        self,
        prefix: str,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> Iterator[str]:
        """Lazily list keys starting with prefix, in ascending key order.

        Args:
            prefix: Full key prefix (e.g., "s3://bucket/backups/orders/node-1/META_V2/2023").
                Not required to end on a "/" boundary.
            delimiter: Optional delimiter to group keys by (S3 semantics).
            marker: If given, only keys lexically greater than marker are
                returned.

        Returns:
            Iterator of full keys. The iterator is finite and single use;
            call again to re-list.

        Raises:
            TransferError: If the listing fails, possibly while iterating.
        """
        ...

    def download(
        self,
        source: str,
        dest: Path,
        progress: ProgressCallback,
        concurrency: int = DEFAULT_DOWNLOAD_CONCURRENCY,
    ) -> None:
        """Download a remote key to a local path.

        The file appears at dest only once complete: data is written to a
        "<dest>.tmp" sibling first and renamed into place.

        Args:
            source: Full remote key.
            dest: Local destination path.
            progress: Callback function(bytes_downloaded, total_bytes).
            concurrency: Parallelism hint passed to the transport.

        Raises:
            TransferError: On transport or I/O failure.
        """
        ...

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        """Upload a local file to remote storage with optional progress.

        Args:
            local: Path to local file.
            dest: Full remote key.
            progress: Optional callback function(bytes_uploaded, total_bytes).
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports transfer progress to the user.

    This protocol defines the contract for progress display adapters.
    The core domain uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a transfer task.

        Args:
            name: Human-readable name for the task (manifest file name).
            total: Total bytes to transfer, 0 if unknown.

        Returns:
            A ProgressCallback to call with (bytes_done, total_bytes).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name passed to start_task().
        """
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _done, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol
