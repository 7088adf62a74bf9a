"""Domain exceptions for snapcatalog.

All library errors inherit from SnapcatalogError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from datetime import datetime
    from pathlib import Path


class SnapcatalogError(Exception):
    """Base class for all snapcatalog exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class MalformedKeyError(SnapcatalogError):
    """Raised when a remote key or local name does not follow the key grammar.

    Attributes:
        key: The key that failed to decode.
        reason: Short description of the first violated rule.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed backup key '{key}': {reason}")

    @property
    def recovery_hint(self) -> str:
        """Describe the expected key layout."""
        return (
            "Expected <root>/<cluster>/<node>/<KIND>/<YYYYMMDDHHMMSS>/<file_name>"
        )


class InvalidRangeError(SnapcatalogError):
    """Raised when a DateRange cannot be built.

    Attributes:
        start: The requested start instant, if it could be parsed.
        end: The requested end instant, if any.
    """

    def __init__(
        self,
        message: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> None:
        self.start = start
        self.end = end
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest the accepted range syntax."""
        return "Use 'YYYYMMDDHHMM,YYYYMMDDHHMM' with start <= end (UTC)"


class TransferError(SnapcatalogError):
    """Base class for remote storage errors.

    Raised when listing or downloading from remote storage (S3, filesystem)
    fails.

    Attributes:
        source: The storage path/URI that caused the error.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class StorageNotFoundError(TransferError):
    """Raised when the requested object or bucket doesn't exist in storage."""

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the path."""
        return f"Verify the source path exists: {self.source}"


class StorageAccessError(TransferError):
    """Raised when access is denied to storage (permissions, credentials)."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking permissions."""
        return "Check credentials and bucket/path permissions"


class RetrievalError(SnapcatalogError):
    """Raised when a manifest cannot be materialized locally.

    Attributes:
        key: Remote key of the manifest.
        dest: Local destination that was being written.
        cause: The underlying TransferError.
    """

    def __init__(
        self,
        key: str,
        dest: Path,
        cause: TransferError | None = None,
    ) -> None:
        self.key = key
        self.dest = dest
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not retrieve manifest '{key}' to {dest}{detail}")

    @property
    def recovery_hint(self) -> str | None:
        """Forward the transport hint when there is one."""
        if self.cause is not None and self.cause.recovery_hint:
            return self.cause.recovery_hint
        return "Retry the download or pick another manifest"


class ManifestParseError(SnapcatalogError):
    """Raised when a downloaded manifest body cannot be read.

    Attributes:
        path: Local path of the manifest.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest re-downloading the manifest."""
        return f"Delete {self.path.name} and materialize it again"


class ConfigurationError(SnapcatalogError):
    """Raised for configuration problems (missing or invalid settings)."""

    pass
