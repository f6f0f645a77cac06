from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from salesledger.core.errors import FilterError
from salesledger.core.types import DateFilter
from salesledger.dates.resolver import (
    local_day,
    partition,
    resolve_range,
    week_key,
    week_number,
    weekday_index,
)

UTC = timezone.utc
NOW = datetime(2025, 3, 12, 15, 0, tzinfo=UTC)


def _stamps() -> list[datetime | None]:
    return [
        datetime(2025, 3, 12, 0, 0, tzinfo=UTC),
        datetime(2025, 3, 11, 23, 59, 59, tzinfo=UTC),
        datetime(2025, 3, 11, 0, 0, tzinfo=UTC),
        datetime(2025, 3, 10, 23, 59, tzinfo=UTC),
        datetime(2024, 12, 31, 8, 0, tzinfo=UTC),
        None,
    ]


def _identity(value: datetime | None) -> datetime | None:
    return value


def test_partitions_by_calendar_day():
    stamps = _stamps()
    parts = partition(stamps, DateFilter.all(), NOW, UTC, _identity)
    assert parts.today == (stamps[0],)
    assert parts.yesterday == (stamps[1], stamps[2])
    assert parts.days_before == (stamps[3], stamps[4])
    # Undated records only count towards the unbounded window.
    assert parts.filtered == tuple(stamps)


def test_filtered_follows_requested_window():
    stamps = _stamps()
    assert partition(stamps, DateFilter("today"), NOW, UTC, _identity).filtered == (stamps[0],)
    assert partition(stamps, DateFilter("days_before"), NOW, UTC, _identity).filtered == (
        stamps[3],
        stamps[4],
    )


def test_custom_range_is_inclusive_and_defaults_to_single_day():
    stamps = _stamps()
    single = DateFilter.custom(date(2025, 3, 11))
    assert single.end == date(2025, 3, 11)
    assert partition(stamps, single, NOW, UTC, _identity).filtered == (stamps[1], stamps[2])
    span = DateFilter.custom(date(2025, 3, 10), date(2025, 3, 12))
    assert partition(stamps, span, NOW, UTC, _identity).filtered == tuple(stamps[:4])


def test_custom_range_rejects_reversed_bounds():
    with pytest.raises(FilterError):
        resolve_range(DateFilter.custom(date(2025, 3, 12), date(2025, 3, 1)), NOW, UTC)
    with pytest.raises(FilterError):
        resolve_range(DateFilter("custom"), NOW, UTC)


def test_resolve_range_edges():
    today = resolve_range(DateFilter("today"), NOW, UTC)
    assert today.start == datetime(2025, 3, 12, tzinfo=UTC)
    assert today.end is not None and today.end.date() == date(2025, 3, 12)
    before = resolve_range(DateFilter("days_before"), NOW, UTC)
    assert before.start is None
    assert before.end is not None
    assert before.end < datetime(2025, 3, 11, tzinfo=UTC)
    assert before.end + timedelta(microseconds=1) == datetime(2025, 3, 11, tzinfo=UTC)
    everything = resolve_range(DateFilter.all(), NOW, UTC)
    assert everything.start is None and everything.end is None


def test_local_day_uses_reporting_timezone():
    tunis = ZoneInfo("Africa/Tunis")
    late = datetime(2025, 3, 11, 23, 30, tzinfo=UTC)
    assert local_day(late, UTC) == date(2025, 3, 11)
    assert local_day(late, tunis) == date(2025, 3, 12)
    now = datetime(2025, 3, 12, 9, 0, tzinfo=UTC)
    assert partition([late], DateFilter("today"), now, tunis, _identity).filtered == (late,)


def test_naive_timestamps_are_reporting_local():
    tunis = ZoneInfo("Africa/Tunis")
    assert local_day(datetime(2025, 3, 12, 0, 30), tunis) == date(2025, 3, 12)


def test_weekday_index_is_sunday_first():
    assert weekday_index(date(2025, 3, 9)) == 0
    assert weekday_index(date(2025, 3, 12)) == 3
    assert weekday_index(date(2025, 3, 15)) == 6


def test_week_number_counts_from_january_first_weekday():
    # 2025-01-01 is a Wednesday, so week 1 runs Wednesday to Saturday.
    assert week_number(date(2025, 1, 1)) == 1
    assert week_number(date(2025, 1, 4)) == 1
    assert week_number(date(2025, 1, 5)) == 2
    assert week_number(date(2025, 3, 12)) == 11
    # 2023-01-01 is a Sunday.
    assert week_number(date(2023, 1, 7)) == 1
    assert week_number(date(2023, 1, 8)) == 2
    assert week_key(date(2025, 2, 27)) == "2025-W09"
