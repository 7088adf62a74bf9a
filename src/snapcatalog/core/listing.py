"""Listing filters for MetaCatalog.

This module contains the streaming decode/filter steps that
MetaCatalog.find_manifests delegates to. Each step consumes and yields
lazily, so a large listing is never held in memory before filtering.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from snapcatalog.core.exceptions import MalformedKeyError


if TYPE_CHECKING:
    from snapcatalog.core.codec import BackupPathCodec
    from snapcatalog.core.models import ArtifactKind, BackupPath, DateRange


logger = logging.getLogger(__name__)


def decode_keys(
    keys: Iterable[str],
    codec: BackupPathCodec,
    log: logging.Logger = logger,
) -> Iterator[BackupPath]:
    """Decode raw keys, skipping any that do not follow the key layout.

    A foreign or corrupted key is logged and dropped; it never aborts the
    listing.
    """
    for key in keys:
        try:
            path = codec.decode(key)
        except MalformedKeyError as e:
            log.warning("Skipping undecodable key %s: %s", key, e.reason)
            continue
        log.debug("Backup file found: %s", key)
        yield path


def of_kind(
    paths: Iterable[BackupPath],
    kind: ArtifactKind,
    log: logging.Logger = logger,
) -> Iterator[BackupPath]:
    """Keep only paths of kind."""
    for path in paths:
        if path.kind is not kind:
            log.debug("Skipping %s: kind %s is not %s", path.remote_key, path.kind, kind)
            continue
        yield path


def within_range(
    paths: Iterable[BackupPath],
    date_range: DateRange,
) -> Iterator[BackupPath]:
    """Keep only paths whose last_modified falls inside date_range (inclusive)."""
    return (path for path in paths if date_range.contains(path.last_modified))
