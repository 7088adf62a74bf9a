"""Core domain models for snapcatalog.

These models are pure Python dataclasses with no I/O dependencies.
They represent backup artifacts and the time windows used to search for them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Self

from snapcatalog.core.exceptions import InvalidRangeError
from snapcatalog.core.path_utils import (
    MINUTE_FORMAT,
    common_token,
    date_token,
    to_utc,
)


class ArtifactKind(StrEnum):
    """Kind of a backup artifact. The value is the tag used in remote keys."""

    META_V2 = "META_V2"
    META = "META"
    SST_V2 = "SST_V2"
    CL = "CL"
    OTHER = "OTHER"


@dataclass(frozen=True, slots=True)
class BackupPath:
    """Identity of one backup artifact, local or remote.

    Attributes:
        cluster: Name of the cluster the node belongs to.
        node: Identifier of the node that produced the artifact.
        kind: Artifact kind (manifest, snapshot data, commit log, ...).
        last_modified: When the artifact was produced, in UTC. Stored at
            whole-second resolution, the resolution of the key encoding.
        file_name: Base name of the artifact file.
        remote_key: Full remote key the artifact was listed under. Not part
            of equality, two keys for the same identity compare equal.

    Example:
        >>> from datetime import UTC, datetime
        >>> meta = BackupPath(
        ...     cluster="orders",
        ...     node="node-1",
        ...     kind=ArtifactKind.META_V2,
        ...     last_modified=datetime(2023, 5, 1, 10, 0, tzinfo=UTC),
        ...     file_name="meta_v2_202305011000.json",
        ... )
        >>> meta.local_file(Path("/var/meta")).name
        'meta_v2_202305011000.json'
    """

    cluster: str
    node: str
    kind: ArtifactKind
    last_modified: datetime
    file_name: str
    remote_key: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        """Validate identity fields and normalise the timestamp."""
        for name in ("cluster", "node", "file_name"):
            value = getattr(self, name)
            if not value:
                raise ValueError(f"BackupPath {name} cannot be empty")
            if "/" in value:
                raise ValueError(f"BackupPath {name} cannot contain '/': {value}")
        object.__setattr__(self, "kind", ArtifactKind(self.kind))
        normalized = to_utc(self.last_modified).replace(microsecond=0)
        object.__setattr__(self, "last_modified", normalized)

    def with_remote_key(self, remote_key: str) -> Self:
        """Return a copy of this path carrying remote_key."""
        return replace(self, remote_key=remote_key)

    def local_file(self, directory: Path) -> Path:
        """Local destination for this artifact inside directory."""
        return directory / self.file_name


def rank_newest_first(paths: Iterable[BackupPath]) -> list[BackupPath]:
    """Sort backup paths newest first.

    Ties on last_modified are broken by remote_key ascending, so the result
    does not depend on the order the remote store listed the keys in.
    """
    by_key = sorted(paths, key=lambda p: p.remote_key)
    # Stable sort keeps the key order inside equal timestamps
    return sorted(by_key, key=lambda p: p.last_modified, reverse=True)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive [start, end] time window.

    Attributes:
        start: First instant of the window (UTC).
        end: Last instant of the window (UTC), or None for an open-ended
            window. Open-ended ranges are used to compute listing markers.

    Raises:
        InvalidRangeError: If end is before start.
    """

    start: datetime
    end: datetime | None = None

    def __post_init__(self) -> None:
        """Normalise to UTC and validate ordering."""
        object.__setattr__(self, "start", to_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", to_utc(self.end))
            if self.end < self.start:
                raise InvalidRangeError(
                    f"Range end {self.end.isoformat()} is before "
                    f"start {self.start.isoformat()}",
                    start=self.start,
                    end=self.end,
                )

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse "YYYYMMDDHHMM,YYYYMMDDHHMM" or an open-ended "YYYYMMDDHHMM".

        Times are UTC.

        Raises:
            InvalidRangeError: If either bound does not parse, or end < start.
        """
        parts = [part.strip() for part in text.split(",")]
        if len(parts) > 2 or not parts[0]:
            raise InvalidRangeError(f"Invalid date range '{text}'")
        try:
            bounds = [datetime.strptime(part, MINUTE_FORMAT) for part in parts]
        except ValueError as e:
            raise InvalidRangeError(f"Invalid date range '{text}': {e}") from e
        return cls(bounds[0], bounds[1] if len(bounds) == 2 else None)

    @classmethod
    def last(cls, hours: float, now: datetime | None = None) -> Self:
        """Range covering the last hours up to now (inclusive)."""
        end = to_utc(now) if now is not None else datetime.now(UTC)
        return cls(end - timedelta(hours=hours), end)

    @property
    def is_bounded(self) -> bool:
        """Whether the range has an end."""
        return self.end is not None

    def match(self) -> str:
        """Coarse date token used to narrow remote listings.

        For an open-ended range this is the start's YYYYMMDD token. With an
        end it is the common prefix of both date tokens, which equals the
        start's token when both fall on the same day.
        """
        start_token = date_token(self.start)
        if self.end is None:
            return start_token
        return common_token(start_token, date_token(self.end))

    def contains(self, instant: datetime) -> bool:
        """Exact inclusive bound check."""
        instant = to_utc(instant)
        if instant < self.start:
            return False
        return self.end is None or instant <= self.end

    def __str__(self) -> str:
        end = self.end.isoformat() if self.end is not None else "open"
        return f"[{self.start.isoformat()}, {end}]"
