"""Timezone-aware date helpers used by the streak state machine.

Calendar arithmetic (adding days, weeks, months, finding the start of a day)
is performed on local wall-clock time in the user's IANA timezone so that
due dates land on local midnight across DST changes. Elapsed-time math
between two instants (hours until a deadline, "has the deadline passed")
is performed in UTC.
"""

import logging
import math
from datetime import UTC, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta

from habitquest.core.config import settings


logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


def resolve_timezone(name: str | None = None) -> tzinfo:
    """Resolve an IANA timezone name, falling back to the configured default.

    Unknown names are logged and treated as UTC so that streak evaluation
    never fails on a bad user preference.
    """
    tz_name = (name or settings.default_timezone).strip()
    if tz_name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # Directory names such as "America" raise IsADirectoryError
        logger.warning("Unknown timezone %r, falling back to UTC", tz_name)
        return UTC


def to_local(dt: datetime, tz: tzinfo) -> datetime:
    """Convert a datetime to the given timezone; naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(tz)


def local_now(tz: tzinfo, now: datetime | None = None) -> datetime:
    """Return the current instant (or the supplied one) in the given timezone."""
    if now is None:
        return datetime.now(tz)
    return to_local(now, tz)


def start_of_day(dt: datetime) -> datetime:
    """Local midnight of the calendar day containing ``dt``."""
    return _normalize(datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo))


def add_days(dt: datetime, days: int) -> datetime:
    """Add calendar days on the local wall clock."""
    return _normalize(dt + timedelta(days=days))


def add_months(dt: datetime, months: int) -> datetime:
    """Add calendar months, clamping to the end of shorter months (Jan 31 + 1 month = Feb 28)."""
    return _normalize(dt + relativedelta(months=months))


def add_years(dt: datetime, years: int) -> datetime:
    """Add calendar years on the local wall clock."""
    return _normalize(dt + relativedelta(years=years))


def _normalize(dt: datetime) -> datetime:
    # Wall-clock times that fall in a DST gap are shifted to a real instant
    return dt.astimezone(UTC).astimezone(dt.tzinfo)


def is_same_day(first: datetime, second: datetime) -> bool:
    """Whether two local datetimes fall on the same calendar day."""
    return first.date() == second.date()


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole days between two local datetimes, measured on the wall clock.

    Truncates toward zero, so 47 hours is 1 day and a day containing a DST
    change still counts as one day.
    """
    delta = later.replace(tzinfo=None) - earlier.replace(tzinfo=None)
    return math.trunc(delta / timedelta(days=1))


def months_between(later: datetime, earlier: datetime) -> int:
    """Whole calendar months between two local datetimes (truncated toward zero)."""
    delta = relativedelta(later.replace(tzinfo=None), earlier.replace(tzinfo=None))
    return delta.years * 12 + delta.months


def hours_between(later: datetime, earlier: datetime) -> float:
    """Fractional elapsed hours between two instants, computed in UTC."""
    return (later.astimezone(UTC) - earlier.astimezone(UTC)).total_seconds() / SECONDS_PER_HOUR


def is_after(first: datetime, second: datetime) -> bool:
    """Whether ``first`` is a strictly later instant than ``second``."""
    return first.astimezone(UTC) > second.astimezone(UTC)


def is_before(first: datetime, second: datetime) -> bool:
    """Whether ``first`` is a strictly earlier instant than ``second``."""
    return first.astimezone(UTC) < second.astimezone(UTC)
