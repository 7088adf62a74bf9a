"""Local manifest maintenance for MetaCatalog.

This module contains the retention sweep that MetaCatalog delegates to when
the local manifest directory is about to be repopulated from remote.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path

    from snapcatalog.core.meta_files import MetaFileInfo


logger = logging.getLogger(__name__)


def find_local_meta_files(directory: Path, info: MetaFileInfo) -> list[Path]:
    """List manifest files directly inside directory (non-recursive).

    Both finished manifests and ".tmp" files left by interrupted downloads
    are returned. A missing directory yields an empty list.
    """
    if not directory.is_dir():
        return []
    return sorted(
        path for path in directory.iterdir() if info.matches(path.name) and path.is_file()
    )


def prune_meta_files(
    directory: Path,
    info: MetaFileInfo,
    log: logging.Logger = logger,
) -> int:
    """Delete every manifest file in directory matching info's naming convention.

    Deletion is unconditional and best effort: a file that cannot be removed
    is logged and the sweep moves on to the next one.

    Args:
        directory: Local manifest directory.
        info: Naming convention of the manifests to delete.
        log: Logger receiving per-file diagnostics.

    Returns:
        Number of files removed.
    """
    removed = 0
    for path in find_local_meta_files(directory, info):
        log.debug("Deleting old %s file found: %s", info.kind, path)
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            log.warning("Could not delete old manifest %s: %s", path, e)
            continue
        removed += 1
    return removed
