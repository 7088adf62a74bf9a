"""Filesystem storage adapter for local file operations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from snapcatalog.core.exceptions import StorageNotFoundError, TransferError
from snapcatalog.core.ports import DEFAULT_DOWNLOAD_CONCURRENCY


if TYPE_CHECKING:
    from collections.abc import Iterator

    from snapcatalog.core.ports import ProgressCallback


# Chunk size for reading files (64KB)
_CHUNK_SIZE = 64 * 1024


class FilesystemStorage:
    """Storage adapter that treats a local directory tree as a bucket.

    Implements RemoteFileSystem protocol for local file operations. Keys are
    POSIX paths of files under the root. Useful for local development and
    testing without S3.
    """

    def __init__(self, root: Path | str) -> None:
        """Initialize filesystem storage.

        Args:
            root: Directory holding the backups.
        """
        self._root = Path(root).absolute()

    def root_prefix(self) -> str:
        """Return the backup root directory as a POSIX path."""
        return self._root.as_posix()

    def list_under(
        self,
        prefix: str,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> Iterator[str]:
        """List file paths starting with prefix, in ascending order.

        Like S3, the prefix is a plain string prefix and does not need to
        end on a directory boundary. A prefix whose directory does not exist
        yields nothing. Only directories that can hold matching paths after
        marker are read, and keys are yielded as the walk reaches them.

        Args:
            prefix: Path prefix to match.
            delimiter: Optional delimiter; keys containing it after the
                prefix are grouped into one "<prefix><group><delimiter>" entry.
            marker: Only paths lexically after marker are returned.

        Yields:
            Matching POSIX paths.

        Raises:
            TransferError: If a directory cannot be read.
        """
        base = Path(prefix) if prefix.endswith("/") else Path(prefix).parent
        if not base.is_dir():
            return

        last_group: str | None = None
        for key in self._walk(base, prefix, marker):
            if marker is not None and key <= marker:
                continue
            if delimiter:
                rest = key[len(prefix) :]
                cut = rest.find(delimiter)
                if cut != -1:
                    group = prefix + rest[: cut + len(delimiter)]
                    if group != last_group:
                        last_group = group
                        yield group
                    continue
            yield key

    def _walk(self, directory: Path, prefix: str, marker: str | None) -> Iterator[str]:
        """Yield files under directory that start with prefix, in key order."""
        try:
            entries = [(p, p.is_dir()) for p in directory.iterdir()]
        except OSError as e:
            raise TransferError(
                f"Cannot list {directory.as_posix()}: {e}",
                source=prefix,
                cause=e,
            ) from e

        # A directory's keys all start with "<dir>/", so it sorts as that string
        entries.sort(key=lambda e: e[0].as_posix() + "/" if e[1] else e[0].as_posix())
        for path, is_dir in entries:
            key = path.as_posix()
            if not is_dir:
                if key.startswith(prefix):
                    yield key
                continue
            subtree = key + "/"
            if not (subtree.startswith(prefix) or prefix.startswith(subtree)):
                continue
            if marker is not None and subtree < marker and not marker.startswith(subtree):
                continue
            yield from self._walk(path, prefix, marker)

    def download(
        self,
        source: str,
        dest: Path,
        progress: ProgressCallback,
        concurrency: int = DEFAULT_DOWNLOAD_CONCURRENCY,  # noqa: ARG002
    ) -> None:
        """Copy a file from source to dest with progress reporting.

        The copy is written to "<dest>.tmp" and renamed into place.

        Args:
            source: Path to source file.
            dest: Destination path.
            progress: Callback function(bytes_downloaded, total_bytes).
            concurrency: Ignored, local copies are sequential.

        Raises:
            StorageNotFoundError: If source file does not exist.
            TransferError: If reading or writing fails.
        """
        source_path = Path(source)
        try:
            total_size = source_path.stat().st_size
        except FileNotFoundError as e:
            raise StorageNotFoundError(
                f"File not found: {source}",
                source=source,
                cause=e,
            ) from e

        bytes_copied = 0
        tmp = dest.with_name(dest.name + ".tmp")

        try:
            with source_path.open("rb") as src, tmp.open("wb") as dst:
                for chunk in iter(lambda: src.read(_CHUNK_SIZE), b""):
                    dst.write(chunk)
                    bytes_copied += len(chunk)
                    progress(bytes_copied, total_size)
            tmp.replace(dest)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise TransferError(
                f"Copy failed for {source}: {e}",
                source=source,
                cause=e,
            ) from e

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        """Copy a local file to destination path with optional progress reporting.

        Args:
            local: Path to local file.
            dest: Destination path string.
            progress: Optional callback function(bytes_uploaded, total_bytes).

        Raises:
            FileNotFoundError: If local file does not exist.
        """
        dest_path = Path(dest)
        dest_path.parent.mkdir(parents=True, exist_ok=True)

        total_size = local.stat().st_size
        bytes_uploaded = 0

        with local.open("rb") as src, dest_path.open("wb") as dst:
            for chunk in iter(lambda: src.read(_CHUNK_SIZE), b""):
                dst.write(chunk)
                bytes_uploaded += len(chunk)
                if progress:
                    progress(bytes_uploaded, total_size)
