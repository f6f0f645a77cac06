"""Calendar-day windows in the reporting timezone.

Every comparison here works on local civil days: an instant is moved into
the reporting timezone and truncated to its date before it is matched
against a window or dropped into a bucket.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Generic, TypeVar

from salesledger.core.errors import FilterError
from salesledger.core.types import FILTER_KINDS, DateFilter, DateRange

T = TypeVar("T")

WEEKDAY_LABELS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True, slots=True)
class Partitions(Generic[T]):
    today: tuple[T, ...]
    yesterday: tuple[T, ...]
    days_before: tuple[T, ...]
    filtered: tuple[T, ...]


def to_local(instant: datetime, tz: tzinfo) -> datetime:
    # Naive instants are already reporting-local.
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def local_day(instant: datetime, tz: tzinfo) -> date:
    return to_local(instant, tz).date()


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def validate_filter(date_filter: DateFilter) -> None:
    if date_filter.kind not in FILTER_KINDS:
        raise FilterError(f"Unknown date filter: {date_filter.kind!r}")
    if date_filter.kind != "custom":
        return
    if date_filter.start is None:
        raise FilterError("custom date filter requires a start date")
    end = date_filter.end or date_filter.start
    if end < date_filter.start:
        raise FilterError(f"custom date filter ends ({end}) before it starts ({date_filter.start})")


def resolve_range(date_filter: DateFilter, now: datetime, tz: tzinfo) -> DateRange:
    validate_filter(date_filter)
    today = local_day(now, tz)
    yesterday = today - timedelta(days=1)
    if date_filter.kind == "today":
        return DateRange(start_of_day(today, tz), end_of_day(today, tz))
    if date_filter.kind == "yesterday":
        return DateRange(start_of_day(yesterday, tz), end_of_day(yesterday, tz))
    if date_filter.kind == "days_before":
        return DateRange(None, end_of_day(yesterday - timedelta(days=1), tz))
    if date_filter.kind == "custom" and date_filter.start is not None:
        last = date_filter.end or date_filter.start
        return DateRange(start_of_day(date_filter.start, tz), end_of_day(last, tz))
    return DateRange(None, None)


def partition(
    records: Sequence[T],
    date_filter: DateFilter,
    now: datetime,
    tz: tzinfo,
    timestamp: Callable[[T], datetime | None],
) -> Partitions[T]:
    windows = {
        kind: resolve_range(DateFilter(kind), now, tz)
        for kind in ("today", "yesterday", "days_before")
    }
    requested = resolve_range(date_filter, now, tz)
    unbounded = date_filter.kind == "all"
    buckets: dict[str, list[T]] = {kind: [] for kind in windows}
    filtered: list[T] = []
    for record in records:
        instant = timestamp(record)
        if instant is None:
            if unbounded:
                filtered.append(record)
            continue
        local = to_local(instant, tz)
        for kind, window in windows.items():
            if window.contains(local):
                buckets[kind].append(record)
        if requested.contains(local):
            filtered.append(record)
    return Partitions(
        today=tuple(buckets["today"]),
        yesterday=tuple(buckets["yesterday"]),
        days_before=tuple(buckets["days_before"]),
        filtered=tuple(filtered),
    )


def weekday_index(day: date) -> int:
    """Sunday-first weekday, 0..6."""
    return (day.weekday() + 1) % 7


def week_number(day: date) -> int:
    """Week of year counted from January 1st's weekday (Sunday-first).

    Not ISO-8601: week 1 is the (possibly partial) week holding January 1st,
    and weeks roll over on Sunday.
    """
    jan1 = date(day.year, 1, 1)
    elapsed = (day - jan1).days
    return math.ceil((elapsed + weekday_index(jan1) + 1) / 7)


def week_key(day: date) -> str:
    return f"{day.year}-W{week_number(day):02d}"


def month_key(day: date) -> str:
    return f"{day.year}-{day.month:02d}"


def day_key(day: date) -> str:
    return day.isoformat()
