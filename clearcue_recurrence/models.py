"""Value types for recurrence expansion.

All types are immutable. They are created fresh for every expansion call and
carry no references back to storage; `source_id` is an opaque string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from . import const
from .utils.dt_utils import dt_combine, end_of_day


class RecurrencePattern(Enum):
    """Closed set of repeat patterns, valued by their store names."""

    HOURLY = const.PATTERN_HOURLY
    DAILY = const.PATTERN_DAILY
    WEEKLY = const.PATTERN_WEEKLY
    MONTHLY = const.PATTERN_MONTHLY
    YEARLY = const.PATTERN_YEARLY
    WEEKDAYS = const.PATTERN_WEEKDAYS
    WEEKENDS = const.PATTERN_WEEKENDS

    @property
    def uses_interval(self) -> bool:
        """WEEKDAYS/WEEKENDS always step one day; the interval is ignored."""
        return self not in (RecurrencePattern.WEEKDAYS, RecurrencePattern.WEEKENDS)

    @classmethod
    def try_parse(cls, s: str) -> RecurrencePattern | None:
        try:
            return cls(s.strip().lower())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


class OccurrenceKind(Enum):
    """Reminder kinds that can share a calendar day."""

    NOTE = const.KIND_NOTE
    TASK = const.KIND_TASK
    EVENT = const.KIND_EVENT
    MEDICATION = const.KIND_MEDICATION
    BILL = const.KIND_BILL

    @classmethod
    def try_parse(cls, s: str) -> OccurrenceKind | None:
        """Parse a store type name, accepting the aliases "med" and "reminder"."""
        key = s.strip().lower()
        key = const.KIND_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# --- End condition ---


@dataclass(frozen=True, slots=True)
class NoEnd:
    pass


@dataclass(frozen=True, slots=True)
class EndDate:
    """Last calendar day on which an occurrence may fall (inclusive)."""

    until: date


@dataclass(frozen=True, slots=True)
class OccurrenceCount:
    """Total number of occurrences, counted from the anchor."""

    count: int


EndCondition = NoEnd | EndDate | OccurrenceCount


# --- Rule ---


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """How a reminder repeats.

    Attributes:
        pattern: Repeat pattern
        interval: Every N units (ignored for WEEKDAYS/WEEKENDS)
        days_of_week: Weekday indices (0=Sunday ... 6=Saturday), WEEKLY only.
            Empty means "same weekday as the anchor".
        end_condition: NoEnd, EndDate or OccurrenceCount
    """

    pattern: RecurrencePattern
    interval: int = const.DEFAULT_INTERVAL
    days_of_week: frozenset[int] = field(default_factory=frozenset)
    end_condition: EndCondition = field(default_factory=NoEnd)

    @property
    def effective_interval(self) -> int:
        if isinstance(self.pattern, RecurrencePattern) and not self.pattern.uses_interval:
            return 1
        return self.interval

    @property
    def end_date(self) -> date | None:
        if isinstance(self.end_condition, EndDate):
            return self.end_condition.until
        return None

    @property
    def max_occurrences(self) -> int | None:
        if isinstance(self.end_condition, OccurrenceCount):
            return self.end_condition.count
        return None

    def validate(self) -> dict[str, str]:
        """Check rule invariants without raising or coercing anything.

        Returns:
            Dict of errors: {FIELD_*: ERROR_*}. Empty dict means the rule is valid.

        Validation Rules:
            1. pattern is a RecurrencePattern member
            2. interval is an int >= 1 (bool rejected)
            3. days_of_week only for WEEKLY, every index within 0..6
            4. end_condition is a known variant; OccurrenceCount needs count >= 1
        """
        errors: dict[str, str] = {}

        # === 1. Pattern ===
        if not isinstance(self.pattern, RecurrencePattern):
            errors[const.FIELD_PATTERN] = const.ERROR_INVALID_PATTERN

        # === 2. Interval ===
        if (
            isinstance(self.interval, bool)
            or not isinstance(self.interval, int)
            or self.interval < 1
        ):
            errors[const.FIELD_INTERVAL] = const.ERROR_INVALID_INTERVAL

        # === 3. Day set ===
        if self.days_of_week:
            if self.pattern is not RecurrencePattern.WEEKLY:
                errors[const.FIELD_DAYS_OF_WEEK] = const.ERROR_DAYS_NOT_ALLOWED
            elif any(
                isinstance(day, bool)
                or not isinstance(day, int)
                or not const.SUNDAY <= day <= const.SATURDAY
                for day in self.days_of_week
            ):
                errors[const.FIELD_DAYS_OF_WEEK] = const.ERROR_DAYS_OUT_OF_RANGE

        # === 4. End condition ===
        end = self.end_condition
        if isinstance(end, OccurrenceCount):
            count = end.count
            if isinstance(count, bool) or not isinstance(count, int) or count < 1:
                errors[const.FIELD_END_CONDITION] = (
                    const.ERROR_INVALID_OCCURRENCE_COUNT
                )
        elif isinstance(end, EndDate):
            if not isinstance(end.until, date):
                errors[const.FIELD_END_CONDITION] = const.ERROR_INVALID_END_CONDITION
        elif not isinstance(end, NoEnd):
            errors[const.FIELD_END_CONDITION] = const.ERROR_INVALID_END_CONDITION

        return errors


# --- Anchor / window / occurrence ---


@dataclass(frozen=True, slots=True)
class Anchor:
    """The date (and optional time) a rule is defined relative to."""

    date: date
    time: time | None = None

    @property
    def starts_at(self) -> datetime:
        return dt_combine(self.date, self.time)

    @classmethod
    def from_datetime(cls, value: datetime) -> Anchor:
        return cls(value.date(), value.time())


@dataclass(frozen=True, slots=True)
class ExpansionWindow:
    """Caller bounds on an expansion: inclusive date range plus a count cap."""

    start: date
    end: date
    max_count: int = const.DEFAULT_MAX_OCCURRENCES

    @property
    def is_empty(self) -> bool:
        return self.max_count == 0 or self.start > self.end

    def validate(self) -> dict[str, str]:
        """Return {FIELD_*: ERROR_*}; an empty or inverted range is not an error."""
        errors: dict[str, str] = {}
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            errors[const.FIELD_WINDOW] = const.ERROR_INVALID_WINDOW
        if (
            isinstance(self.max_count, bool)
            or not isinstance(self.max_count, int)
            or self.max_count < 0
        ):
            errors[const.FIELD_MAX_COUNT] = const.ERROR_INVALID_MAX_COUNT
        return errors


@dataclass(frozen=True, slots=True)
class Occurrence:
    """One concrete instance of a reminder.

    Attributes:
        source_id: Opaque id of the owning reminder
        date: Calendar day of the instance
        time: Time of day, or None for all-day reminders
        kind: Reminder kind (drives same-day display priority)
        completed: Whether this instance has been completed
        index: 0-based ordinal of the instance counted from the anchor
    """

    source_id: str
    date: date
    time: time | None
    kind: OccurrenceKind
    completed: bool = False
    index: int = 0

    @property
    def occurrence_id(self) -> str:
        """Stable id: "<source_id>_<YYYY-MM-DD>", plus "T<HHMM>" when timed."""
        base = f"{self.source_id}_{self.date.isoformat()}"
        if self.time is not None:
            return f"{base}T{self.time.hour:02d}{self.time.minute:02d}"
        return base

    @property
    def starts_at(self) -> datetime:
        """Calendar placement: date + time, or start of day."""
        return dt_combine(self.date, self.time)

    @property
    def due_at(self) -> datetime:
        """Overdue reference: date + time, or end of day."""
        if self.time is None:
            return end_of_day(self.date)
        return dt_combine(self.date, self.time)


@dataclass(frozen=True, slots=True)
class ReminderSchedule:
    """Everything the engine needs from one reminder record.

    Built from a raw store dict by data_builders.build_reminder_schedule().
    `rule` is None for one-off reminders.
    """

    source_id: str
    anchor: Anchor
    rule: RecurrenceRule | None
    kind: OccurrenceKind = OccurrenceKind.TASK
    completed: bool = False
    completed_dates: frozenset[date] = field(default_factory=frozenset)

    @property
    def is_recurring(self) -> bool:
        return self.rule is not None
