"""Core domain services for snapcatalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from snapcatalog.core.exceptions import InvalidRangeError, RetrievalError, TransferError
from snapcatalog.core.listing import decode_keys, of_kind, within_range
from snapcatalog.core.meta_files import META_V2, MetaFileInfo, meta_file_info
from snapcatalog.core.meta_maintenance import prune_meta_files
from snapcatalog.core.models import BackupPath, DateRange, rank_newest_first
from snapcatalog.core.path_utils import join_key
from snapcatalog.core.ports import (
    DEFAULT_DOWNLOAD_CONCURRENCY,
    NullProgressReporter,
    ProgressReporter,
    RemoteFileSystem,
)


if TYPE_CHECKING:
    from pathlib import Path

    from snapcatalog.config import SnapcatalogSettings
    from snapcatalog.core.codec import BackupPathCodec


logger = logging.getLogger(__name__)


class MetaCatalog:
    """Finds, ranks, downloads and prunes backup manifests.

    The catalog keeps no state between calls besides its collaborators:
    every listing recomputes prefixes from the configured identity and the
    requested DateRange. The manifest format is fixed at construction.
    """

    def __init__(
        self,
        meta_dir: Path,
        storage: RemoteFileSystem,
        codec: BackupPathCodec,
        meta_info: MetaFileInfo = META_V2,
        *,
        download_concurrency: int = DEFAULT_DOWNLOAD_CONCURRENCY,
        log: logging.Logger | None = None,
    ) -> None:
        self._meta_dir = meta_dir
        self._storage = storage
        self._codec = codec
        self._meta_info = meta_info
        self._download_concurrency = download_concurrency
        self._log = log or logger

    @classmethod
    def from_settings(
        cls,
        settings: SnapcatalogSettings,
        *,
        s3_client: Any | None = None,
        log: logging.Logger | None = None,
    ) -> MetaCatalog:
        """Create a MetaCatalog from sidecar settings.

        Args:
            settings: Loaded settings.
            s3_client: Optional boto3 S3 client for s3:// backup locations.
            log: Optional logger, defaults to this module's logger.

        Returns:
            MetaCatalog with the storage adapter and manifest format
            selected by configuration.
        """
        from snapcatalog.adapters.storage import create_storage
        from snapcatalog.core.codec import BackupPathCodec

        return cls(
            meta_dir=settings.resolved_data_dir(),
            storage=create_storage(settings.backup_location, s3_client=s3_client),
            codec=BackupPathCodec(settings.cluster_name, settings.node_id),
            meta_info=meta_file_info(settings.manifest_format),
            download_concurrency=settings.download_concurrency,
            log=log,
        )

    @property
    def meta_info(self) -> MetaFileInfo:
        """Naming convention of the manifests this catalog manages."""
        return self._meta_info

    @property
    def storage(self) -> RemoteFileSystem:
        """Remote storage the manifests are listed from."""
        return self._storage

    @property
    def codec(self) -> BackupPathCodec:
        """Codec used to encode and decode remote keys."""
        return self._codec

    def get_local_manifest_directory(self) -> Path:
        """Local directory manifests are downloaded to."""
        return self._meta_dir

    def get_search_prefix(self, date_range: DateRange | None) -> str:
        """Remote listing prefix for manifests, narrowed by date_range.

        Args:
            date_range: Window to narrow to, or None for all manifests.

        Returns:
            "<root>/<cluster>/<node>/<KIND>/<match>", where match is the
            range's coarse date token (empty without a range).
        """
        location = self._storage.root_prefix()
        match = date_range.match() if date_range is not None else ""
        return join_key(self._codec.remote_prefix(location, self._meta_info.kind), match)

    def find_manifests(self, date_range: DateRange) -> list[BackupPath]:
        """Find remote manifests inside date_range, newest first.

        The listing is narrowed by prefix and marker, then every key is
        decoded and checked against the exact range bounds as it streams in.
        Keys that do not decode are logged and skipped.

        Args:
            date_range: Bounded window to search (both start and end set).

        Returns:
            Manifests sorted by last_modified descending, ties by remote key
            ascending. Empty when no manifest falls inside the window.

        Raises:
            InvalidRangeError: If date_range has no end.
            TransferError: If the remote listing fails.
        """
        if date_range.end is None:
            raise InvalidRangeError(
                "find_manifests needs a bounded range (start and end)",
                start=date_range.start,
            )

        prefix = self.get_search_prefix(date_range)
        marker = self.get_search_prefix(DateRange(date_range.start))
        self._log.info(
            "Listing filesystem with prefix: %s, marker: %s, daterange: %s",
            prefix,
            marker,
            date_range,
        )

        keys = self._storage.list_under(prefix, None, marker)
        paths = decode_keys(keys, self._codec, self._log)
        manifests = of_kind(paths, self._meta_info.kind, self._log)
        metas = rank_newest_first(within_range(manifests, date_range))

        if not metas:
            self._log.info(
                "No meta file found on remote file system for the time period: %s",
                date_range,
            )
        return metas

    def find_latest(self, date_range: DateRange) -> BackupPath | None:
        """Newest manifest inside date_range, or None."""
        metas = self.find_manifests(date_range)
        return metas[0] if metas else None

    def materialize(
        self,
        manifest: BackupPath,
        progress: ProgressReporter | None = None,
    ) -> Path:
        """Download a manifest into the local manifest directory.

        An existing local copy is overwritten.

        Args:
            manifest: Manifest to download, as returned by find_manifests().
            progress: Optional progress reporter for download feedback.

        Returns:
            Path of the local copy.

        Raises:
            RetrievalError: If the download fails.
        """
        if progress is None:
            progress = NullProgressReporter()

        dest = manifest.local_file(self._meta_dir)
        source = manifest.remote_key or self._codec.encode(
            manifest, self._storage.root_prefix()
        )

        self._log.info("Downloading meta file %s to %s", source, dest)
        callback = progress.start_task(manifest.file_name, 0)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            self._storage.download(source, dest, callback, self._download_concurrency)
        except TransferError as e:
            raise RetrievalError(source, dest, cause=e) from e
        except OSError as e:
            raise RetrievalError(
                source, dest, cause=TransferError(str(e), source=source, cause=e)
            ) from e
        finally:
            progress.finish_task(manifest.file_name)
        return dest

    def prune_local_manifests(self) -> None:
        """Delete every local manifest, including partial ".tmp" downloads.

        Used right before repopulating the directory from remote. Files that
        cannot be deleted are logged and skipped.
        """
        self._log.info("Deleting any old %s files if any", self._meta_info.kind)
        removed = prune_meta_files(self._meta_dir, self._meta_info, self._log)
        self._log.info("Deleted %d old %s file(s)", removed, self._meta_info.kind)

    def extract_artifact_list(self, local_path: Path) -> list[str] | None:
        """Artifact keys recorded in a downloaded manifest.

        Returns:
            The keys for V1 manifests; None for V2 manifests, whose body is
            owned by the snapshot format and not enumerated here.

        Raises:
            ManifestParseError: If a V1 manifest cannot be parsed.
        """
        return self._meta_info.read_artifacts(local_path)
