"""Find and fetch the newest manifest of the last day.

This example shows the simplest usage pattern: wire a catalog for one
node, search a time window, and download the newest manifest in it.
"""

from datetime import UTC, datetime, timedelta
from pathlib import Path

from snapcatalog import BackupPathCodec, DateRange, FilesystemStorage, MetaCatalog


# Option 1: Manual wiring (full control over adapters)
# Use this when you need a custom storage backend or manifest format
catalog = MetaCatalog(
    meta_dir=Path("./data/meta"),
    storage=FilesystemStorage("./backups"),
    codec=BackupPathCodec(cluster="orders", node="node-1"),
)

# Option 2: Factory method (recommended for most cases)
# Reads SNAPCATALOG_* environment variables or a .env file
# catalog = MetaCatalog.from_settings(load_settings())

now = datetime.now(UTC)
window = DateRange(now - timedelta(days=1), now)

# Manifests inside the window, newest first
for manifest in catalog.find_manifests(window):
    print(f"{manifest.last_modified:%Y-%m-%d %H:%M}  {manifest.remote_key}")

# Drop old local copies, then download the newest one
latest = catalog.find_latest(window)
if latest is not None:
    catalog.prune_local_manifests()
    path = catalog.materialize(latest)
    print(f"Manifest available at: {path}")
