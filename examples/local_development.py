"""Local development without S3.

A plain directory can stand in for the bucket. Seed it with a manifest
encoded under the node's key layout, then search and fetch it as usual.
"""

import json
from datetime import UTC, datetime
from pathlib import Path

from snapcatalog import (
    META_V1,
    BackupPathCodec,
    DateRange,
    FilesystemStorage,
    MetaCatalog,
)


backups = Path("./backups")
storage = FilesystemStorage(backups)
codec = BackupPathCodec(cluster="orders", node="node-1")

# V1 manifests are JSON arrays of artifact keys
catalog = MetaCatalog(
    meta_dir=Path("./data/meta"),
    storage=storage,
    codec=codec,
    meta_info=META_V1,
)

# Seed one manifest as a snapshot producer would
taken_at = datetime(2024, 3, 1, 2, 30, tzinfo=UTC)
manifest = codec.new_path(META_V1.kind, taken_at, META_V1.file_name(taken_at))
draft = Path("./manifest.json")
draft.write_text(json.dumps(["orders/node-1/SST_V2/20240301023000/nb-1-big-Data.db"]))
storage.upload(draft, codec.encode(manifest, storage.root_prefix()))

window = DateRange.parse("202403010000,202403012359")
latest = catalog.find_latest(window)
assert latest is not None

local = catalog.materialize(latest)
print(catalog.extract_artifact_list(local))
