"""Schedule Engine - next-occurrence arithmetic for recurring reminders.

Given the instant of one occurrence and a validated RecurrenceRule, compute
the instant of the following occurrence. The single guarantee the rest of
the package relies on: the result is strictly later than the input.

Calendar arithmetic:
- `timedelta` for fixed-length steps and whole-period skips
- `dateutil.relativedelta` for month/year clamping (Jan 31 + 1 month = Feb 28)
- `dateutil.rrule` (WEEKLY, byweekday, wkst=SU) for weekly day sets

Weekly rules with listed weekdays keep their phase relative to the week
containing the ORIGINAL anchor: with interval=2 the active weeks are the
anchor week, then every second week after it, no matter which weekday of an
active week the previous occurrence fell on.

ARCHITECTURE: Pure logic, no state, no clock reads. All methods are static.
Input validation belongs to the caller (see expansion_engine).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from dateutil.rrule import (
    FR,
    MO,
    SA,
    SU,
    TH,
    TU,
    WE,
    WEEKLY,
    rrule,
)

from .. import const
from ..models import EndDate, OccurrenceCount, RecurrencePattern, RecurrenceRule
from ..utils.dt_utils import dt_add_months, dt_add_years, store_weekday

# rrule weekday constants indexed by store weekday (0=Sunday)
_RRULE_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)


class ScheduleEngine:
    """Stateless next-occurrence calculator.

    All methods are static - no instance state. The expander receives
    `ScheduleEngine.next_occurrence` as its default calculator.
    """

    @staticmethod
    def next_occurrence(
        current: datetime,
        rule: RecurrenceRule,
        anchor: datetime | None = None,
    ) -> datetime:
        """Return the occurrence that follows `current`.

        Args:
            current: Instant of the current occurrence (naive, local).
            rule: A validated recurrence rule.
            anchor: Instant of the rule's original anchor. Used for the weekly
                multi-day phase and to remember the anchor's day of month.
                Defaults to `current`.

        Returns:
            A datetime strictly later than `current`, time of day preserved.

        Raises:
            ValueError: The rule's pattern is not a RecurrencePattern member.
        """
        anchor_dt = anchor or current
        interval = rule.effective_interval

        match rule.pattern:
            case RecurrencePattern.HOURLY:
                return current + timedelta(hours=interval)
            case RecurrencePattern.DAILY:
                return current + timedelta(days=interval)
            case RecurrencePattern.WEEKLY:
                if rule.days_of_week:
                    return ScheduleEngine._next_weekly_on_days(
                        current, rule.days_of_week, interval, anchor_dt
                    )
                return current + timedelta(weeks=interval)
            case RecurrencePattern.MONTHLY:
                return dt_add_months(current, interval, day_of_month=anchor_dt.day)
            case RecurrencePattern.YEARLY:
                return dt_add_years(
                    current,
                    interval,
                    month=anchor_dt.month,
                    day_of_month=anchor_dt.day,
                )
            case RecurrencePattern.WEEKDAYS:
                return ScheduleEngine._next_on_days(current, const.WORKING_DAYS)
            case RecurrencePattern.WEEKENDS:
                return ScheduleEngine._next_on_days(current, const.WEEKEND_DAYS)

        raise ValueError(f"Unhandled recurrence pattern: {rule.pattern!r}")

    @staticmethod
    def matches_day(day: date, rule: RecurrenceRule) -> bool:
        """Whether `day` is a weekday the rule can ever land on.

        Only day-filtering patterns (WEEKLY with days, WEEKDAYS, WEEKENDS)
        can reject a day; every other pattern accepts any anchor day.
        """
        weekday = store_weekday(day)
        match rule.pattern:
            case RecurrencePattern.WEEKLY if rule.days_of_week:
                return weekday in rule.days_of_week
            case RecurrencePattern.WEEKDAYS:
                return weekday in const.WORKING_DAYS
            case RecurrencePattern.WEEKENDS:
                return weekday in const.WEEKEND_DAYS
        return True

    @staticmethod
    def first_occurrence(anchor: datetime, rule: RecurrenceRule) -> datetime:
        """Return the first instance of the rule at or after its anchor.

        The anchor itself is the first instance when its weekday matches the
        rule; a Tuesday anchor on a Mon/Wed weekly rule starts on Wednesday.
        """
        if ScheduleEngine.matches_day(anchor.date(), rule):
            return anchor
        return ScheduleEngine.next_occurrence(anchor, rule, anchor)

    @staticmethod
    def repeat_cycle(rule: RecurrenceRule) -> tuple[timedelta, int] | None:
        """Return (span, instances per span) for rules that repeat exactly.

        Starting from any instance, the instances one span later are the same
        pattern shifted by the span, so whole spans can be skipped with
        arithmetic. Months and years vary in length and return None.

        Examples:
            DAILY every 3 days -> (3 days, 1)
            WEEKLY every 2 weeks on Mon/Wed -> (14 days, 2)
            WEEKDAYS -> (7 days, 5)
        """
        interval = rule.effective_interval
        match rule.pattern:
            case RecurrencePattern.HOURLY:
                return timedelta(hours=interval), 1
            case RecurrencePattern.DAILY:
                return timedelta(days=interval), 1
            case RecurrencePattern.WEEKLY:
                return timedelta(weeks=interval), max(1, len(rule.days_of_week))
            case RecurrencePattern.WEEKDAYS:
                return timedelta(weeks=1), len(const.WORKING_DAYS)
            case RecurrencePattern.WEEKENDS:
                return timedelta(weeks=1), len(const.WEEKEND_DAYS)
        return None

    @staticmethod
    def describe(rule: RecurrenceRule) -> str:
        """Return a short English summary of the rule.

        Examples:
            "Daily", "Every 3 days", "Weekly on Monday, Wednesday",
            "Every 2 weeks on Friday, until 2024-06-30", "Monthly, 5 times"
        """
        interval = rule.effective_interval
        match rule.pattern:
            case RecurrencePattern.HOURLY:
                text = _every(interval, "Hourly", "hours")
            case RecurrencePattern.DAILY:
                text = _every(interval, "Daily", "days")
            case RecurrencePattern.WEEKLY:
                text = _every(interval, "Weekly", "weeks")
                if rule.days_of_week:
                    names = ", ".join(
                        const.WEEKDAY_NAMES[day] for day in sorted(rule.days_of_week)
                    )
                    text = f"{text} on {names}"
            case RecurrencePattern.MONTHLY:
                text = _every(interval, "Monthly", "months")
            case RecurrencePattern.YEARLY:
                text = _every(interval, "Yearly", "years")
            case RecurrencePattern.WEEKDAYS:
                text = "Every weekday (Monday-Friday)"
            case RecurrencePattern.WEEKENDS:
                text = "Every weekend (Saturday-Sunday)"
            case _:
                raise ValueError(f"Unhandled recurrence pattern: {rule.pattern!r}")

        match rule.end_condition:
            case EndDate(until=until):
                text += f", until {until.isoformat()}"
            case OccurrenceCount(count=1):
                text += ", once"
            case OccurrenceCount(count=count):
                text += f", {count} times"

        return text

    # =========================================================================
    # Private helpers
    # =========================================================================

    @staticmethod
    def _next_weekly_on_days(
        current: datetime,
        days: frozenset[int],
        interval: int,
        anchor: datetime,
    ) -> datetime:
        """Next listed weekday, phased on the anchor's week (weeks start Sunday).

        Returns:
            The first rrule instance strictly after `current`.

        Raises:
            ValueError: No instance exists before the end of the calendar.
        """
        # Moving dtstart by whole periods keeps the active weeks unchanged
        period = timedelta(weeks=interval)
        periods = max(0, (current.date() - anchor.date()) // period)
        dtstart = datetime.combine(anchor.date() + period * periods, current.time())

        schedule = rrule(
            WEEKLY,
            interval=interval,
            dtstart=dtstart,
            byweekday=[_RRULE_WEEKDAYS[day] for day in sorted(days)],
            wkst=SU,
        )
        # rrule instances carry no microseconds; restore those of `current`
        result = schedule.after(current.replace(microsecond=0))
        if result is None:
            raise ValueError(f"No weekly occurrence after {current.isoformat()}")
        return result.replace(microsecond=current.microsecond)

    @staticmethod
    def _next_on_days(current: datetime, allowed: frozenset[int]) -> datetime:
        """Step one day at a time until the weekday is in `allowed`.

        `allowed` is never empty (WORKING_DAYS / WEEKEND_DAYS), so this ends
        within a week.
        """
        result = current + timedelta(days=1)
        while store_weekday(result.date()) not in allowed:
            result += timedelta(days=1)
        return result


def _every(interval: int, single: str, unit: str) -> str:
    return single if interval == 1 else f"Every {interval} {unit}"


# =============================================================================
# Module-level convenience functions
# =============================================================================


def next_occurrence(
    current: datetime,
    rule: RecurrenceRule,
    anchor: datetime | None = None,
) -> datetime:
    """Calculate the occurrence after `current` (see ScheduleEngine.next_occurrence)."""
    return ScheduleEngine.next_occurrence(current, rule, anchor)


def describe_rule(rule: RecurrenceRule) -> str:
    """Human-readable rule summary (see ScheduleEngine.describe)."""
    return ScheduleEngine.describe(rule)
