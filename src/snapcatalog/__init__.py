"""snapcatalog - A catalog of backup manifests kept in remote storage.

This library finds the manifest ("meta") files describing point-in-time
backups of a storage node, ranks them newest first, downloads the one you
pick and sweeps stale local copies.

Example:
    >>> from datetime import UTC, datetime
    >>> from snapcatalog import DateRange, MetaCatalog, load_settings
    >>> catalog = MetaCatalog.from_settings(load_settings())
    >>> window = DateRange(
    ...     datetime(2023, 5, 1, tzinfo=UTC), datetime(2023, 5, 2, tzinfo=UTC)
    ... )
    >>> latest = catalog.find_latest(window)
    >>> if latest is not None:
    ...     path = catalog.materialize(latest)
"""

from snapcatalog.adapters.storage import (
    FilesystemStorage,
    S3Storage,
    create_storage,
)
from snapcatalog.config import SnapcatalogSettings, find_project_root, load_settings
from snapcatalog.core.codec import BackupPathCodec
from snapcatalog.core.exceptions import (
    ConfigurationError,
    InvalidRangeError,
    MalformedKeyError,
    ManifestParseError,
    RetrievalError,
    SnapcatalogError,
    StorageAccessError,
    StorageNotFoundError,
    TransferError,
)
from snapcatalog.core.meta_files import (
    META_V1,
    META_V2,
    ManifestFormat,
    MetaFileInfo,
    meta_file_info,
)
from snapcatalog.core.models import (
    ArtifactKind,
    BackupPath,
    DateRange,
    rank_newest_first,
)
from snapcatalog.core.ports import (
    NullProgressReporter,
    ProgressCallback,
    ProgressReporter,
    RemoteFileSystem,
)
from snapcatalog.core.services import MetaCatalog
from snapcatalog.progress import RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "META_V1",
    "META_V2",
    "ArtifactKind",
    "BackupPath",
    "BackupPathCodec",
    "ConfigurationError",
    "DateRange",
    "FilesystemStorage",
    "InvalidRangeError",
    "MalformedKeyError",
    "ManifestFormat",
    "ManifestParseError",
    "MetaCatalog",
    "MetaFileInfo",
    "NullProgressReporter",
    "ProgressCallback",
    "ProgressReporter",
    "RemoteFileSystem",
    "RetrievalError",
    "RichProgressReporter",
    "S3Storage",
    "SnapcatalogError",
    "SnapcatalogSettings",
    "StorageAccessError",
    "StorageNotFoundError",
    "TransferError",
    "__version__",
    "create_storage",
    "find_project_root",
    "load_settings",
    "meta_file_info",
    "rank_newest_first",
]
