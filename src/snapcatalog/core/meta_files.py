"""Manifest ("meta") file naming and format variants.

A manifest is the small descriptor object that enumerates the payload
artifacts belonging to one backup. Each ManifestFormat has its own artifact
kind and local naming convention, described by a MetaFileInfo.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from snapcatalog.core.exceptions import ManifestParseError
from snapcatalog.core.models import ArtifactKind
from snapcatalog.core.path_utils import MINUTE_FORMAT, to_utc


if TYPE_CHECKING:
    from pathlib import Path


# Suffix appended to a manifest while it is being written
TMP_SUFFIX = ".tmp"


class ManifestFormat(StrEnum):
    """Supported manifest layouts."""

    V1 = "v1"
    V2 = "v2"


@dataclass(frozen=True, slots=True)
class MetaFileInfo:
    """Naming convention for one manifest format.

    Attributes:
        format: The manifest format this convention belongs to.
        kind: Artifact kind manifests of this format are stored under.
        prefix: File name prefix of manifests.
        suffix: File name suffix of manifests.
    """

    format: ManifestFormat
    kind: ArtifactKind
    prefix: str
    suffix: str

    def file_name(self, instant: datetime) -> str:
        """Manifest file name for a backup taken at instant."""
        return f"{self.prefix}{to_utc(instant).strftime(MINUTE_FORMAT)}{self.suffix}"

    def matches(self, name: str) -> bool:
        """Whether name is a manifest, finished or still being written."""
        if not name.startswith(self.prefix):
            return False
        return name.endswith(self.suffix) or name.endswith(self.suffix + TMP_SUFFIX)

    def read_artifacts(self, local_path: Path) -> list[str] | None:
        """List the artifact keys recorded in a local manifest.

        V1 manifests are a JSON array of remote keys. V2 manifest bodies
        belong to the snapshot format and cannot be enumerated here, so None
        is returned for them.

        Raises:
            ManifestParseError: If a V1 manifest is unreadable or not a JSON
                array of strings.
        """
        if self.format is ManifestFormat.V2:
            return None

        try:
            with local_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ManifestParseError(
                f"Cannot read manifest {local_path}: {e}",
                path=local_path,
                cause=e,
            ) from e

        if not isinstance(data, list) or not all(isinstance(i, str) for i in data):
            raise ManifestParseError(
                f"Manifest {local_path} is not a JSON array of keys",
                path=local_path,
            )
        return data


META_V1 = MetaFileInfo(
    format=ManifestFormat.V1,
    kind=ArtifactKind.META,
    prefix="meta_v1_",
    suffix=".json",
)

META_V2 = MetaFileInfo(
    format=ManifestFormat.V2,
    kind=ArtifactKind.META_V2,
    prefix="meta_v2_",
    suffix=".json",
)

_BY_FORMAT = {info.format: info for info in (META_V1, META_V2)}


def meta_file_info(manifest_format: ManifestFormat | str) -> MetaFileInfo:
    """Return the naming convention for a manifest format.

    Raises:
        ValueError: If the format is unknown.
    """
    return _BY_FORMAT[ManifestFormat(manifest_format)]
