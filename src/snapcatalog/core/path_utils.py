"""Timestamp and key-segment helpers.

Every timestamp that ends up in a remote key goes through these functions so
that encoding, decoding and listing tokens agree on UTC and resolution.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime


# Resolution of the timestamp segment in remote keys
KEY_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
# Resolution of the coarse listing token
DATE_TOKEN_FORMAT = "%Y%m%d"
# Timestamp embedded in manifest file names and accepted by DateRange.parse
MINUTE_FORMAT = "%Y%m%d%H%M"


def to_utc(instant: datetime) -> datetime:
    """Return instant as an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def format_key_timestamp(instant: datetime) -> str:
    """Format an instant as the 14 digit key segment (YYYYMMDDHHMMSS)."""
    return to_utc(instant).strftime(KEY_TIMESTAMP_FORMAT)


def parse_key_timestamp(segment: str) -> datetime:
    """Parse a key timestamp segment back into an aware UTC datetime.

    Raises:
        ValueError: If the segment is not exactly 14 digits of a valid instant.
    """
    if len(segment) != 14 or not segment.isdigit():
        raise ValueError(f"expected 14 digits, got '{segment}'")
    return datetime.strptime(segment, KEY_TIMESTAMP_FORMAT).replace(tzinfo=UTC)


def date_token(instant: datetime) -> str:
    """Return the date-resolution token (YYYYMMDD) for an instant."""
    return to_utc(instant).strftime(DATE_TOKEN_FORMAT)


def common_token(first: str, second: str) -> str:
    """Longest common prefix of two tokens."""
    return os.path.commonprefix([first, second])


def join_key(*segments: str) -> str:
    """Join key segments with single slashes.

    A trailing slash on the first segment (e.g. "s3://bucket/") is absorbed so
    that roots can be configured either way.
    """
    head, *rest = segments
    parts = [head.rstrip("/")] if rest else [head]
    parts.extend(segment.strip("/") for segment in rest)
    return "/".join(parts)
