"""Unit tests for domain models."""

from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from snapcatalog.core.exceptions import InvalidRangeError
from snapcatalog.core.models import (
    ArtifactKind,
    BackupPath,
    DateRange,
    rank_newest_first,
)


def make_path(when: datetime, key: str = "", **overrides: object) -> BackupPath:
    fields: dict[str, object] = {
        "cluster": "orders",
        "node": "node-1",
        "kind": ArtifactKind.META_V2,
        "last_modified": when,
        "file_name": "meta_v2.json",
        "remote_key": key,
    }
    fields.update(overrides)
    return BackupPath(**fields)  # type: ignore[arg-type]


@pytest.mark.core
@pytest.mark.tier(0)
class TestBackupPath:
    """Tests for BackupPath value object."""

    def test_naive_timestamp_is_taken_as_utc(self) -> None:
        """Naive last_modified values should be interpreted as UTC."""
        path = make_path(datetime(2023, 5, 1, 10, 0))

        assert path.last_modified == datetime(2023, 5, 1, 10, 0, tzinfo=UTC)
        assert path.last_modified.tzinfo is UTC

    def test_aware_timestamp_is_converted_to_utc(self) -> None:
        """Aware values in another zone should be converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        path = make_path(datetime(2023, 5, 1, 12, 0, tzinfo=plus_two))

        assert path.last_modified == datetime(2023, 5, 1, 10, 0, tzinfo=UTC)

    def test_timestamp_truncated_to_seconds(self) -> None:
        """Sub-second precision is dropped to match the key resolution."""
        path = make_path(datetime(2023, 5, 1, 10, 0, 5, 999_999, tzinfo=UTC))

        assert path.last_modified.microsecond == 0
        assert path.last_modified.second == 5

    def test_kind_string_is_coerced(self) -> None:
        """A kind tag string should become an ArtifactKind."""
        path = make_path(datetime(2023, 5, 1, tzinfo=UTC), kind="CL")

        assert path.kind is ArtifactKind.CL

    @pytest.mark.parametrize("field", ["cluster", "node", "file_name"])
    def test_empty_identity_field_rejected(self, field: str) -> None:
        """Empty identity fields should raise ValueError."""
        with pytest.raises(ValueError, match=field):
            make_path(datetime(2023, 5, 1, tzinfo=UTC), **{field: ""})

    def test_slash_in_identity_rejected(self) -> None:
        """Identity fields are single key segments."""
        with pytest.raises(ValueError, match="cannot contain"):
            make_path(datetime(2023, 5, 1, tzinfo=UTC), node="rack/1")

    def test_is_immutable(self) -> None:
        """BackupPath should be frozen."""
        path = make_path(datetime(2023, 5, 1, tzinfo=UTC))

        with pytest.raises(AttributeError):
            path.node = "node-2"  # type: ignore[misc]

    def test_remote_key_not_part_of_equality(self) -> None:
        """Two paths with the same identity are equal whatever their key."""
        when = datetime(2023, 5, 1, tzinfo=UTC)

        assert make_path(when, key="a") == make_path(when, key="b")

    def test_with_remote_key_returns_new_instance(self) -> None:
        """with_remote_key() should not mutate the original."""
        original = make_path(datetime(2023, 5, 1, tzinfo=UTC))

        keyed = original.with_remote_key("s3://b/k")

        assert keyed.remote_key == "s3://b/k"
        assert original.remote_key == ""

    def test_local_file_uses_file_name(self, tmp_path: Path) -> None:
        """local_file() places the artifact in the given directory."""
        path = make_path(datetime(2023, 5, 1, tzinfo=UTC))

        assert path.local_file(tmp_path) == tmp_path / "meta_v2.json"


@pytest.mark.core
@pytest.mark.tier(0)
class TestRankNewestFirst:
    """Tests for rank_newest_first()."""

    def test_sorts_descending_by_timestamp(self) -> None:
        """Newest entries come first."""
        old = make_path(datetime(2023, 5, 1, 9, tzinfo=UTC), key="k1")
        mid = make_path(datetime(2023, 5, 1, 10, tzinfo=UTC), key="k2")
        new = make_path(datetime(2023, 5, 1, 11, tzinfo=UTC), key="k3")

        assert rank_newest_first([mid, old, new]) == [new, mid, old]

    def test_ties_broken_by_remote_key_ascending(self) -> None:
        """Equal timestamps are ordered by remote key."""
        when = datetime(2023, 5, 1, 10, tzinfo=UTC)
        b = make_path(when, key="s3://x/b", file_name="b.json")
        a = make_path(when, key="s3://x/a", file_name="a.json")
        c = make_path(when, key="s3://x/c", file_name="c.json")

        ranked = rank_newest_first([c, a, b])

        assert [p.remote_key for p in ranked] == ["s3://x/a", "s3://x/b", "s3://x/c"]

    def test_accepts_iterators(self) -> None:
        """Ranking should consume any iterable."""
        paths = (make_path(datetime(2023, 5, d, tzinfo=UTC)) for d in (1, 3, 2))

        ranked = rank_newest_first(paths)

        assert [p.last_modified.day for p in ranked] == [3, 2, 1]

    def test_empty(self) -> None:
        """No input, no output."""
        assert rank_newest_first([]) == []


@pytest.mark.core
@pytest.mark.tier(0)
class TestDateRange:
    """Tests for DateRange."""

    def test_end_before_start_rejected(self) -> None:
        """Construction should fail with InvalidRangeError when end < start."""
        with pytest.raises(InvalidRangeError) as exc_info:
            DateRange(datetime(2023, 5, 2, tzinfo=UTC), datetime(2023, 5, 1, tzinfo=UTC))

        assert exc_info.value.start == datetime(2023, 5, 2, tzinfo=UTC)
        assert exc_info.value.recovery_hint is not None

    def test_single_instant_range_allowed(self) -> None:
        """start == end is a valid range."""
        when = datetime(2023, 5, 1, 10, tzinfo=UTC)

        assert DateRange(when, when).contains(when)

    def test_open_ended_match_is_start_date(self) -> None:
        """Open-ended match() is the start's date token, whatever the time."""
        midnight = DateRange(datetime(2023, 5, 1, 0, 0, tzinfo=UTC))
        evening = DateRange(datetime(2023, 5, 1, 23, 59, tzinfo=UTC))

        assert midnight.match() == "20230501"
        assert evening.match() == "20230501"

    def test_same_day_match_is_date_token(self) -> None:
        """A range inside one day narrows to that day."""
        date_range = DateRange(
            datetime(2023, 5, 1, 9, 58, tzinfo=UTC),
            datetime(2023, 5, 1, 10, 4, tzinfo=UTC),
        )

        assert date_range.match() == "20230501"

    def test_multi_day_match_widens_to_common_prefix(self) -> None:
        """Ranges crossing days, months or years widen the token."""
        days = DateRange(datetime(2023, 5, 1, tzinfo=UTC), datetime(2023, 5, 9, tzinfo=UTC))
        months = DateRange(datetime(2023, 5, 30, tzinfo=UTC), datetime(2023, 6, 2, tzinfo=UTC))
        years = DateRange(datetime(2023, 12, 31, tzinfo=UTC), datetime(2024, 1, 1, tzinfo=UTC))

        assert days.match() == "2023050"
        assert months.match() == "20230"
        assert years.match() == "202"

    def test_match_uses_utc_date(self) -> None:
        """The token is computed on the UTC date."""
        minus_five = timezone(timedelta(hours=-5))
        date_range = DateRange(datetime(2023, 4, 30, 22, 0, tzinfo=minus_five))

        assert date_range.match() == "20230501"

    def test_contains_is_inclusive(self) -> None:
        """Both bounds are inside the range."""
        start = datetime(2023, 5, 1, 9, 58, tzinfo=UTC)
        end = datetime(2023, 5, 1, 10, 4, tzinfo=UTC)
        date_range = DateRange(start, end)

        assert date_range.contains(start)
        assert date_range.contains(end)
        assert not date_range.contains(start - timedelta(seconds=1))
        assert not date_range.contains(end + timedelta(seconds=1))

    def test_open_ended_contains_everything_after_start(self) -> None:
        """Without an end, only the start bound applies."""
        date_range = DateRange(datetime(2023, 5, 1, tzinfo=UTC))

        assert date_range.contains(datetime(2099, 1, 1, tzinfo=UTC))
        assert not date_range.is_bounded

    def test_parse_bounded(self) -> None:
        """parse() accepts 'start,end' in YYYYMMDDHHMM."""
        date_range = DateRange.parse("202305010958,202305011004")

        assert date_range.start == datetime(2023, 5, 1, 9, 58, tzinfo=UTC)
        assert date_range.end == datetime(2023, 5, 1, 10, 4, tzinfo=UTC)

    def test_parse_open_ended(self) -> None:
        """parse() with a single instant leaves end open."""
        date_range = DateRange.parse("202305010000")

        assert date_range.end is None

    @pytest.mark.parametrize(
        "text",
        ["", "2023-05-01", "202305010000,", "202305010000,202305020000,202305030000"],
    )
    def test_parse_rejects_bad_input(self, text: str) -> None:
        """Malformed ranges raise InvalidRangeError."""
        with pytest.raises(InvalidRangeError):
            DateRange.parse(text)

    def test_parse_rejects_reversed_range(self) -> None:
        """parse() still validates ordering."""
        with pytest.raises(InvalidRangeError):
            DateRange.parse("202305020000,202305010000")

    def test_last_hours(self) -> None:
        """last() builds a window ending at now."""
        now = datetime(2023, 5, 1, 12, tzinfo=UTC)

        date_range = DateRange.last(6, now=now)

        assert date_range.start == datetime(2023, 5, 1, 6, tzinfo=UTC)
        assert date_range.end == now
