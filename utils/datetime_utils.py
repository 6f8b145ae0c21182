"""Utilities for ISO-8601 timestamps and local exam date/times."""

from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from dateutil import tz

from core.settings import COUNTDOWN

UTC = timezone.utc


def local_zone() -> tz.tzlocal:
    """The machine zone as a real tzinfo, so each date gets its own DST offset."""

    return tz.tzlocal()


def local_now() -> datetime:
    return datetime.now(local_zone())


def to_local(dt: datetime, zone: Optional[tzinfo] = None) -> datetime:
    return dt.astimezone(zone or local_zone())


def parse_iso(s: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime; ``None`` if malformed."""

    if not s or not isinstance(s, str):
        return None

    value = s.strip()
    if not value:
        return None

    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=local_zone())
    return dt


def to_iso_utc(dt: datetime) -> str:
    """Millisecond-precision UTC string, e.g. ``2025-06-01T09:30:00.000Z``."""

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=local_zone())
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def default_target(now: Optional[datetime] = None) -> datetime:
    current = now or local_now()
    return current.replace(
        hour=COUNTDOWN.default_hour,
        minute=COUNTDOWN.default_minute,
        second=0,
        microsecond=0,
    )


def replace_date(dt: datetime, new_date: date) -> datetime:
    """Swap the calendar date, keeping the wall-clock time.

    The zone is re-applied to the new date, so the UTC offset follows DST.
    """

    return dt.replace(year=new_date.year, month=new_date.month, day=new_date.day)


def replace_time(dt: datetime, new_time: time) -> datetime:
    """Swap the time of day, keeping the calendar date and tzinfo."""

    return dt.replace(
        hour=new_time.hour,
        minute=new_time.minute,
        second=new_time.second,
        microsecond=0,
    )


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from ``start`` to ``end``, clamped at zero."""

    # same-tzinfo subtraction ignores offsets; compare instants in UTC
    delta = int((end.astimezone(UTC) - start.astimezone(UTC)).total_seconds())
    return delta if delta > 0 else 0


__all__ = [
    "UTC",
    "default_target",
    "local_now",
    "local_zone",
    "parse_iso",
    "replace_date",
    "replace_time",
    "seconds_between",
    "to_local",
    "to_iso_utc",
]
