"""Storage backend adapters."""

from snapcatalog.adapters.storage.factory import create_storage
from snapcatalog.adapters.storage.filesystem import FilesystemStorage
from snapcatalog.adapters.storage.s3 import S3Storage


__all__ = ["FilesystemStorage", "S3Storage", "create_storage"]
