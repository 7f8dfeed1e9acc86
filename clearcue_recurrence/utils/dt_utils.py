# File: utils/dt_utils.py
"""Date and time utilities for the recurrence engine.

Pure functions over the standard library datetime types plus dateutil.
Nothing in this module reads the system clock: every "now" is passed in.

The engine works on naive datetimes in one already-resolved local calendar.
Aware datetimes handed in by a host are converted into the configured local
zone (see set_default_timezone) and stripped of tzinfo.

Functions:
    - set_default_timezone / get_default_timezone: Local zone for aware input
    - to_local_naive: Convert an aware datetime to naive local wall time
    - dt_combine: Date + optional time (start of day when time is absent)
    - start_of_day / end_of_day: Day boundaries as naive datetimes
    - dt_parse_date / dt_parse_time: Parse store strings
    - store_weekday: Weekday index with 0=Sunday
    - dt_add_months / dt_add_years: Clamped month/year arithmetic
"""

from __future__ import annotations

from datetime import date, datetime, time
import logging
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from .. import const

_LOGGER = logging.getLogger(__name__)

# Local zone used to naturalise aware datetimes - can be overridden by host
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the local zone used when converting aware datetimes.

    Args:
        tz: ZoneInfo object representing the user's resolved local zone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Return the configured local zone."""
    return DEFAULT_TIME_ZONE


def to_local_naive(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to naive local wall-clock time.

    Naive input is assumed to already be local and is returned unchanged.

    Args:
        dt_obj: Datetime, aware or naive
        tz: Optional zone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Naive datetime in the local calendar.
    """
    if dt_obj.tzinfo is None:
        return dt_obj
    tz_info = tz or DEFAULT_TIME_ZONE
    return dt_obj.astimezone(tz_info).replace(tzinfo=None)


# ==============================================================================
# Day boundaries
# ==============================================================================


def dt_combine(day: date, time_of_day: time | None = None) -> datetime:
    """Combine a date with an optional time; absent time means start of day."""
    return datetime.combine(day, time_of_day or const.START_OF_DAY_TIME)


def start_of_day(day: date) -> datetime:
    """Return 00:00:00 on the given day."""
    return datetime.combine(day, const.START_OF_DAY_TIME)


def end_of_day(day: date) -> datetime:
    """Return 23:59:59.999 on the given day.

    Example:
        end_of_day(date(2024, 1, 1)) -> datetime(2024, 1, 1, 23, 59, 59, 999000)
    """
    return datetime.combine(day, const.END_OF_DAY_TIME)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(date_input: str | date | None) -> date | None:
    """Safely parse a store date into a `datetime.date`.

    Accepts formats:
    - date / datetime objects (datetime is truncated to its date)
    - "2025-04-07" (ISO format)
    - "2025-04-07T09:30:00" (ISO datetime - time part ignored)
    - "2025/04/07"

    Args:
        date_input: Date value to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if date_input is None:
        return None
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    if not isinstance(date_input, str) or not date_input:
        return None

    try:
        return date.fromisoformat(date_input)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(date_input).date()
    except ValueError:
        pass

    try:
        return datetime.strptime(date_input, "%Y/%m/%d").date()
    except ValueError:
        _LOGGER.debug("dt_parse_date: unparseable date %r", date_input)
        return None


def dt_parse_time(time_input: str | time | None) -> time | None:
    """Parse a store time-of-day ("HH:MM" or "HH:MM:SS") into `datetime.time`.

    Returns:
        datetime.time, or None when the input is empty or unparseable.
    """
    if time_input is None:
        return None
    if isinstance(time_input, time):
        return time_input
    if not isinstance(time_input, str) or not time_input.strip():
        return None

    try:
        return time.fromisoformat(time_input.strip())
    except ValueError:
        _LOGGER.debug("dt_parse_time: unparseable time %r", time_input)
        return None


# ==============================================================================
# Weeks
# ==============================================================================


def store_weekday(day: date) -> int:
    """Return the weekday index used by the store (0=Sunday ... 6=Saturday).

    Python's date.weekday() is 0=Monday, so shift by one.
    """
    return (day.weekday() + 1) % const.DAYS_PER_WEEK


# ==============================================================================
# Clamped calendar arithmetic
# ==============================================================================


def dt_add_months(
    dt_obj: datetime, months: int, day_of_month: int | None = None
) -> datetime:
    """Add months, clamping the day to the end of the target month.

    Uses relativedelta so Jan 31 + 1 month = Feb 28 (or 29), never Mar 2/3.

    Args:
        dt_obj: Starting datetime
        months: Months to add (may be negative)
        day_of_month: Day to aim for in the target month; defaults to the
            starting day. relativedelta clamps it when the month is shorter.

    Examples:
        dt_add_months(datetime(2024, 1, 31), 1) -> datetime(2024, 2, 29)
        dt_add_months(datetime(2024, 2, 29), 1, day_of_month=31)
            -> datetime(2024, 3, 31)
    """
    target_day = day_of_month if day_of_month is not None else dt_obj.day
    return dt_obj + relativedelta(months=months, day=target_day)


def dt_add_years(
    dt_obj: datetime,
    years: int,
    month: int | None = None,
    day_of_month: int | None = None,
) -> datetime:
    """Add years, clamping Feb 29 to Feb 28 in non-leap target years.

    Args:
        dt_obj: Starting datetime
        years: Years to add (may be negative)
        month: Month to aim for; defaults to the starting month
        day_of_month: Day to aim for; defaults to the starting day

    Examples:
        dt_add_years(datetime(2024, 2, 29), 1) -> datetime(2025, 2, 28)
        dt_add_years(datetime(2027, 2, 28), 1, month=2, day_of_month=29)
            -> datetime(2028, 2, 29)
    """
    return dt_obj + relativedelta(
        years=years,
        month=month if month is not None else dt_obj.month,
        day=day_of_month if day_of_month is not None else dt_obj.day,
    )
