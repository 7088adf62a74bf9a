"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from pathlib import Path

from snapcatalog import (
    BackupPath,
    BackupPathCodec,
    DateRange,
    FilesystemStorage,
    InvalidRangeError,
    MetaCatalog,
    RetrievalError,
    SnapcatalogError,
    TransferError,
)


catalog = MetaCatalog(
    meta_dir=Path("./data/meta"),
    storage=FilesystemStorage("./backups"),
    codec=BackupPathCodec(cluster="orders", node="node-1"),
)


# Pattern 1: Reject bad user input early
def parse_window(text: str) -> DateRange | None:
    """Parse a user supplied window, printing the expected syntax on error."""
    try:
        return DateRange.parse(text)
    except InvalidRangeError as e:
        print(f"Bad window: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 2: An empty result is not an error
def newest_or_none(window: DateRange) -> BackupPath | None:
    """Return the newest manifest, distinguishing 'none' from 'unknown'."""
    try:
        metas = catalog.find_manifests(window)
    except TransferError as e:
        # Could not determine what is there
        print(f"Listing failed for {e.source}")
        raise
    if not metas:
        print(f"No backup in {window}")
        return None
    return metas[0]


# Pattern 3: Handle download failures
def fetch_or_none(manifest: BackupPath) -> Path | None:
    """Download a manifest, returning None if the transfer fails."""
    try:
        return catalog.materialize(manifest)
    except RetrievalError as e:
        print(f"Could not download {e.key} to {e.dest}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 4: Catch-all for any library error
def fetch_latest_safe(text: str) -> Path | None:
    """Parse, search and download with comprehensive error handling."""
    try:
        window = DateRange.parse(text)
        latest = catalog.find_latest(window)
        return catalog.materialize(latest) if latest is not None else None
    except SnapcatalogError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None
