"""URI scheme-based selection of the remote storage adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from snapcatalog.core.ports import RemoteFileSystem


def parse_uri_scheme(uri: str) -> str | None:
    """Extract the URI scheme from a location string.

    Args:
        uri: Location URI or file path.

    Returns:
        The scheme (e.g., 's3', 'file') or None for local paths.
    """
    if "://" in uri:
        scheme = uri.split("://", 1)[0]
        # Avoid confusing Windows drive letters (C:) with schemes
        if len(scheme) > 1:
            return scheme.lower()
    return None


def strip_file_scheme(uri: str) -> str:
    """Strip file:// prefix from URI, returning plain path.

    Args:
        uri: URI that may have file:// prefix.

    Returns:
        The path without file:// prefix.
    """
    if uri.startswith("file://"):
        return uri[7:]  # len("file://") == 7
    return uri


def create_storage(location: str, s3_client: Any | None = None) -> RemoteFileSystem:
    """Create the RemoteFileSystem adapter for a backup location.

    Args:
        location: Backup root, e.g. "s3://bucket/backups", "file:///srv/backups"
            or "/srv/backups".
        s3_client: Optional boto3 S3 client. If not provided, creates default.

    Returns:
        S3Storage for s3:// locations, FilesystemStorage otherwise.

    Raises:
        ValueError: If the scheme has no adapter.
    """
    from snapcatalog.adapters.storage import FilesystemStorage, S3Storage

    scheme = parse_uri_scheme(location)
    if scheme == "s3":
        return S3Storage(root=location, client=s3_client)
    if scheme in ("file", None):
        return FilesystemStorage(root=strip_file_scheme(location))
    raise ValueError(f"No storage backend registered for scheme '{scheme}'")
