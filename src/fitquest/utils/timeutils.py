"""Timestamp parsing and calendar helpers.

All "current date" values are passed in explicitly by callers; nothing in
this module reads the clock.
"""

import math
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ConfigurationError

SECONDS_PER_DAY = 24 * 60 * 60


def parse_timestamp(value: Any) -> Any:
    """Unwrap a Firestore-style ``{"seconds": n, "nanoseconds": m}`` map.

    Other values are returned untouched so that pydantic can apply its own
    datetime parsing (ISO strings, epoch numbers, datetime instances).
    """
    if isinstance(value, dict) and "seconds" in value:
        seconds = float(value.get("seconds") or 0)
        nanos = float(value.get("nanoseconds") or 0)
        return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    return value


@lru_cache(maxsize=32)
def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {name}", setting="timezone") from e


def to_local(moment: datetime, tz_name: Optional[str] = None) -> datetime:
    """Express an aware datetime in the configured zone.

    Naive datetimes are taken to already be local wall-clock time.
    """
    if tz_name and moment.tzinfo is not None:
        return moment.astimezone(_zone(tz_name))
    return moment


def calendar_day(moment: datetime, tz_name: Optional[str] = None) -> date:
    """Local calendar day of a timestamp."""
    if isinstance(moment, datetime):
        return to_local(moment, tz_name).date()
    return moment


def week_start_date(day: date, week_start: int = 0) -> date:
    """First day of the week containing ``day``.

    Args:
        day: Any calendar day
        week_start: Weekday that opens a week (0 = Monday ... 6 = Sunday)
    """
    offset = (day.weekday() - week_start) % 7
    return day - timedelta(days=offset)


def align_to_reference(moment: datetime, reference: datetime) -> datetime:
    """Make ``moment`` comparable with ``reference``.

    Mixing naive and aware datetimes raises in arithmetic, so the naive side
    is interpreted in the other side's zone (UTC when that is unknown).
    """
    if moment.tzinfo is None and reference.tzinfo is not None:
        return moment.replace(tzinfo=reference.tzinfo)
    if moment.tzinfo is not None and reference.tzinfo is None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed from ``earlier`` to ``later`` (floored, may be negative)."""
    earlier = align_to_reference(earlier, later)
    elapsed = (later - earlier).total_seconds()
    return math.floor(elapsed / SECONDS_PER_DAY)
