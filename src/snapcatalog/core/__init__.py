"""Core domain module for snapcatalog.

This module contains pure Python domain models and port definitions.
It has no I/O dependencies and can be tested in isolation.
"""

from snapcatalog.core.models import ArtifactKind, BackupPath, DateRange
from snapcatalog.core.ports import ProgressCallback, RemoteFileSystem


__all__ = [
    "ArtifactKind",
    "BackupPath",
    "DateRange",
    "ProgressCallback",
    "RemoteFileSystem",
]
