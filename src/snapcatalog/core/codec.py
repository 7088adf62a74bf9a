"""Encoding of backup paths to and from remote keys.

Key layout, with the last five segments fixed::

    <root>/<cluster>/<node>/<KIND>/<YYYYMMDDHHMMSS>/<file_name>

Cluster, node and kind come before the timestamp, so a string prefix of a
key selects one node's artifacts of one kind, narrowed to a date window by
appending a date token.
"""

from __future__ import annotations

from datetime import datetime

from snapcatalog.core.exceptions import MalformedKeyError
from snapcatalog.core.models import ArtifactKind, BackupPath
from snapcatalog.core.path_utils import (
    format_key_timestamp,
    join_key,
    parse_key_timestamp,
)


# cluster, node, kind, timestamp, file name
_IDENTITY_SEGMENTS = 5


class BackupPathCodec:
    """Encodes and decodes BackupPath values for one node identity.

    Attributes:
        cluster: Cluster name used for new paths and listing prefixes.
        node: Node identifier used for new paths and listing prefixes.
    """

    def __init__(self, cluster: str, node: str) -> None:
        if not cluster or "/" in cluster:
            raise ValueError(f"Invalid cluster name: '{cluster}'")
        if not node or "/" in node:
            raise ValueError(f"Invalid node identifier: '{node}'")
        self.cluster = cluster
        self.node = node

    def new_path(
        self,
        kind: ArtifactKind,
        last_modified: datetime,
        file_name: str,
    ) -> BackupPath:
        """Create a fresh BackupPath for this node."""
        return BackupPath(
            cluster=self.cluster,
            node=self.node,
            kind=kind,
            last_modified=last_modified,
            file_name=file_name,
        )

    def encode(self, path: BackupPath, root: str) -> str:
        """Build the remote key for path under root."""
        return join_key(
            root,
            path.cluster,
            path.node,
            path.kind.value,
            format_key_timestamp(path.last_modified),
            path.file_name,
        )

    def decode(self, key: str) -> BackupPath:
        """Parse a remote key into a BackupPath.

        The returned path carries key as its remote_key.

        Raises:
            MalformedKeyError: If the key does not follow the key layout.
        """
        if key.endswith("/"):
            raise MalformedKeyError(key, "key names a directory, not a file")
        segments = key.split("/")
        if len(segments) <= _IDENTITY_SEGMENTS:
            raise MalformedKeyError(
                key,
                f"expected a root and {_IDENTITY_SEGMENTS} segments, "
                f"got {len(segments)} segments",
            )

        cluster, node, tag, stamp, file_name = segments[-_IDENTITY_SEGMENTS:]
        if not all((cluster, node, tag, stamp, file_name)):
            raise MalformedKeyError(key, "empty segment")

        try:
            kind = ArtifactKind(tag)
        except ValueError:
            raise MalformedKeyError(key, f"unknown artifact kind '{tag}'") from None

        try:
            last_modified = parse_key_timestamp(stamp)
        except ValueError as e:
            raise MalformedKeyError(key, f"bad timestamp: {e}") from e

        return BackupPath(
            cluster=cluster,
            node=node,
            kind=kind,
            last_modified=last_modified,
            file_name=file_name,
            remote_key=key,
        )

    def remote_prefix(self, root: str, kind: ArtifactKind) -> str:
        """Root-relative listing prefix for this node's artifacts of kind."""
        return join_key(root, self.cluster, self.node, kind.value)
