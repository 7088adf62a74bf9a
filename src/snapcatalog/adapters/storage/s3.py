"""S3 storage adapter using boto3."""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

import boto3
from boto3.exceptions import S3TransferFailedError
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from snapcatalog.core.exceptions import (
    StorageAccessError,
    StorageNotFoundError,
    TransferError,
)
from snapcatalog.core.ports import DEFAULT_DOWNLOAD_CONCURRENCY


if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from mypy_boto3_s3 import S3Client

    from snapcatalog.core.ports import ProgressCallback


# Chunk size for reading uploads (64KB)
_CHUNK_SIZE = 64 * 1024


class S3Storage:
    """Storage adapter for S3 operations.

    Implements RemoteFileSystem protocol for AWS S3. Keys are exchanged as
    full "s3://bucket/key" URIs.
    """

    def __init__(self, root: str, client: S3Client | None = None) -> None:
        """Initialize S3 storage.

        Args:
            root: Backup root URI (s3://bucket or s3://bucket/prefix).
            client: Optional boto3 S3 client. If not provided, creates a default client.
        """
        self._parse_s3_uri_prefix(root)  # Validate early
        self._root = root.rstrip("/")
        self._client = client or boto3.client("s3")

    def root_prefix(self) -> str:
        """Return the configured backup root URI."""
        return self._root

    def list_under(
        self,
        prefix: str,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> Iterator[str]:
        """Lazily list S3 keys under prefix, page by page.

        Args:
            prefix: S3 URI prefix (e.g., "s3://bucket/backups/orders/node-1/META_V2/2023").
            delimiter: Optional delimiter; grouped common prefixes are yielded
                alongside object keys.
            marker: Only keys lexically after this S3 URI are returned
                (S3 StartAfter).

        Yields:
            Full S3 URIs in ascending key order.

        Raises:
            StorageNotFoundError: If the bucket does not exist.
            StorageAccessError: If access is denied.
            TransferError: For other S3 errors.
        """
        bucket, key_prefix = self._parse_s3_uri_prefix(prefix)

        params: dict[str, str] = {"Bucket": bucket, "Prefix": key_prefix}
        if delimiter:
            params["Delimiter"] = delimiter
        if marker:
            marker_bucket, start_after = self._parse_s3_uri_prefix(marker)
            if marker_bucket != bucket:
                raise ValueError(f"Marker {marker} is not in bucket {bucket}")
            params["StartAfter"] = start_after

        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(**params):
                keys = [obj["Key"] for obj in page.get("Contents", [])]
                groups = [cp["Prefix"] for cp in page.get("CommonPrefixes", [])]
                for key in heapq.merge(keys, groups):
                    yield f"s3://{bucket}/{key}"
        except ClientError as e:
            raise self._translate_client_error(e, prefix) from e
        except BotoCoreError as e:
            raise self._translate_botocore_error(e, prefix) from e

    def download(
        self,
        source: str,
        dest: Path,
        progress: ProgressCallback,
        concurrency: int = DEFAULT_DOWNLOAD_CONCURRENCY,
    ) -> None:
        """Download an S3 object to dest via the boto3 transfer manager.

        Data lands in "<dest>.tmp" and is renamed to dest once complete.

        Args:
            source: S3 URI (s3://bucket/key).
            dest: Local destination path.
            progress: Callback function(bytes_downloaded, total_bytes).
            concurrency: Maximum parallel part downloads.

        Raises:
            StorageNotFoundError: If object does not exist.
            StorageAccessError: If access is denied.
            TransferError: For other S3 or local I/O errors.
        """
        bucket, key = self._parse_s3_uri(source)

        try:
            response = self._client.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            raise self._translate_client_error(e, source) from e
        except BotoCoreError as e:
            raise self._translate_botocore_error(e, source) from e
        total_size = response["ContentLength"]

        bytes_downloaded = 0

        def on_chunk(chunk_size: int) -> None:
            nonlocal bytes_downloaded
            bytes_downloaded += chunk_size
            progress(bytes_downloaded, total_size)

        tmp = dest.with_name(dest.name + ".tmp")
        try:
            self._client.download_file(
                Bucket=bucket,
                Key=key,
                Filename=str(tmp),
                Callback=on_chunk,
                Config=TransferConfig(max_concurrency=concurrency),
            )
            tmp.replace(dest)
        except ClientError as e:
            tmp.unlink(missing_ok=True)
            raise self._translate_client_error(e, source) from e
        except BotoCoreError as e:
            tmp.unlink(missing_ok=True)
            raise self._translate_botocore_error(e, source) from e
        except (S3TransferFailedError, OSError) as e:
            tmp.unlink(missing_ok=True)
            raise TransferError(
                f"Download failed for {source}: {e}",
                source=source,
                cause=e,
            ) from e

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        """Upload a local file to S3 with optional progress reporting.

        Args:
            local: Path to local file.
            dest: S3 URI (s3://bucket/key).
            progress: Optional callback function(bytes_uploaded, total_bytes).

        Raises:
            FileNotFoundError: If local file does not exist.
            TransferError: If the upload is rejected.
        """
        bucket, key = self._parse_s3_uri(dest)
        total_size = local.stat().st_size
        bytes_uploaded = 0

        # Read file in chunks, tracking progress
        chunks: list[bytes] = []
        with local.open("rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                chunks.append(chunk)
                bytes_uploaded += len(chunk)
                if progress:
                    progress(bytes_uploaded, total_size)

        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=b"".join(chunks))
        except ClientError as e:
            raise self._translate_client_error(e, dest) from e
        except BotoCoreError as e:
            raise self._translate_botocore_error(e, dest) from e

    def _parse_s3_uri_prefix(self, uri: str) -> tuple[str, str]:
        """Parse an S3 URI prefix into bucket and key prefix.

        Unlike _parse_s3_uri, this allows empty key (bucket-level prefix).

        Args:
            uri: S3 URI in format s3://bucket/ or s3://bucket/prefix.

        Returns:
            Tuple of (bucket, key_prefix).

        Raises:
            ValueError: If URI is not a valid S3 URI.
        """
        if not uri.startswith("s3://"):
            raise ValueError(f"Invalid S3 URI: {uri}")

        path = uri[5:]  # Remove s3://
        parts = path.split("/", 1)
        bucket = parts[0]
        if not bucket:
            raise ValueError(f"Invalid S3 URI (missing bucket): {uri}")
        key_prefix = parts[1] if len(parts) > 1 else ""

        return bucket, key_prefix

    def _parse_s3_uri(self, uri: str) -> tuple[str, str]:
        """Parse an S3 URI into bucket and key.

        Args:
            uri: S3 URI in format s3://bucket/key.

        Returns:
            Tuple of (bucket, key).

        Raises:
            ValueError: If URI is not a valid S3 URI.
        """
        bucket, key = self._parse_s3_uri_prefix(uri)
        if not key:
            raise ValueError(f"Invalid S3 URI (missing key): {uri}")
        return bucket, key

    def _translate_client_error(self, error: ClientError, source: str) -> TransferError:
        """Translate botocore ClientError to domain exception.

        Args:
            error: The botocore ClientError.
            source: The source URI for context.

        Returns:
            Appropriate TransferError subclass.
        """
        code = error.response.get("Error", {}).get("Code", "")

        # Not found errors
        if code in ("404", "NoSuchKey", "NoSuchBucket"):
            return StorageNotFoundError(
                f"Object not found: {source}",
                source=source,
                cause=error,
            )

        # Access denied errors
        if code in ("403", "AccessDenied"):
            return StorageAccessError(
                f"Access denied: {source}",
                source=source,
                cause=error,
            )

        # Generic S3 error
        return TransferError(
            f"S3 error ({code}): {error}",
            source=source,
            cause=error,
        )

    def _translate_botocore_error(
        self, error: BotoCoreError, source: str
    ) -> TransferError:
        """Translate client-side botocore failures (connection, timeout, credentials)."""
        if isinstance(error, NoCredentialsError):
            return StorageAccessError(
                f"No AWS credentials for {source}",
                source=source,
                cause=error,
            )
        return TransferError(f"S3 error: {error}", source=source, cause=error)
