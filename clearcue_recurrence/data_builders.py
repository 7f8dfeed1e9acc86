"""Reminder record builders.

This module is the SINGLE SOURCE OF TRUTH for turning a raw reminder-store
document into engine values:

- Schema check of the raw dict (voluptuous): types and presence only
- Field parsing: ISO dates, "HH:MM" times, kind aliases
- Rule construction and business-rule validation via RecurrenceRule.validate()

### Build / Validate pair
- `build_reminder_schedule()` returns a ReminderSchedule or raises
  RuleValidationError naming the offending field.
- `validate_reminder_data()` runs the same checks and returns
  {FIELD_*: ERROR_*} instead of raising (empty dict means valid).

Nothing is silently coerced: an interval of 0, an unknown pattern or both an
end date and an occurrence cap are errors. The one tolerance inherited from
the app: `repeat_days` is only read for weekly reminders, since the app keeps
stale day selections around after the user switches pattern.
"""

from __future__ import annotations

from datetime import date, time
from typing import Any

import voluptuous as vol

from . import const
from .exceptions import RuleValidationError
from .models import (
    Anchor,
    EndCondition,
    EndDate,
    NoEnd,
    OccurrenceCount,
    OccurrenceKind,
    RecurrencePattern,
    RecurrenceRule,
    ReminderSchedule,
)
from .type_defs import ReminderData
from .utils.dt_utils import dt_parse_date, dt_parse_time

# ==============================================================================
# SCHEMA
# ==============================================================================

_OPTIONAL_INT = vol.Any(None, int)

REMINDER_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_REMINDER_ID): vol.All(str, vol.Length(min=1)),
        vol.Optional(const.DATA_REMINDER_TYPE, default=const.DEFAULT_KIND): str,
        vol.Required(const.DATA_REMINDER_DUE_DATE): vol.Any(str, date),
        vol.Optional(const.DATA_REMINDER_DUE_TIME, default=None): vol.Any(
            None, str, time
        ),
        vol.Optional(const.DATA_REMINDER_COMPLETED, default=False): bool,
        vol.Optional(const.DATA_REMINDER_IS_RECURRING, default=False): bool,
        vol.Optional(const.DATA_REMINDER_REPEAT_PATTERN, default=None): vol.Any(
            None, str
        ),
        vol.Optional(
            const.DATA_REMINDER_CUSTOM_INTERVAL, default=None
        ): _OPTIONAL_INT,
        vol.Optional(const.DATA_REMINDER_REPEAT_DAYS, default=list): vol.Any(
            None, [int]
        ),
        vol.Optional(const.DATA_REMINDER_RECURRING_END_DATE, default=None): vol.Any(
            None, str, date
        ),
        vol.Optional(
            const.DATA_REMINDER_MAX_OCCURRENCES, default=None
        ): _OPTIONAL_INT,
        vol.Optional(const.DATA_REMINDER_COMPLETED_DATES, default=list): vol.Any(
            None, [vol.Any(str, date)]
        ),
    },
    extra=vol.ALLOW_EXTRA,
)

# Store key -> validation field reported to callers
_RECORD_KEY_TO_FIELD: dict[str, str] = {
    const.DATA_REMINDER_ID: const.FIELD_ANCHOR,
    const.DATA_REMINDER_TYPE: const.FIELD_KIND,
    const.DATA_REMINDER_DUE_DATE: const.FIELD_ANCHOR,
    const.DATA_REMINDER_DUE_TIME: const.FIELD_ANCHOR,
    const.DATA_REMINDER_COMPLETED: const.FIELD_ANCHOR,
    const.DATA_REMINDER_IS_RECURRING: const.FIELD_PATTERN,
    const.DATA_REMINDER_REPEAT_PATTERN: const.FIELD_PATTERN,
    const.DATA_REMINDER_CUSTOM_INTERVAL: const.FIELD_INTERVAL,
    const.DATA_REMINDER_REPEAT_DAYS: const.FIELD_DAYS_OF_WEEK,
    const.DATA_REMINDER_RECURRING_END_DATE: const.FIELD_END_CONDITION,
    const.DATA_REMINDER_MAX_OCCURRENCES: const.FIELD_END_CONDITION,
    const.DATA_REMINDER_COMPLETED_DATES: const.FIELD_ANCHOR,
}


def _schema_error(err: vol.Invalid) -> RuleValidationError:
    """Translate a voluptuous error into a RuleValidationError."""
    key = str(err.path[0]) if err.path else ""
    field = _RECORD_KEY_TO_FIELD.get(key, const.FIELD_ANCHOR)
    return RuleValidationError(
        field=field,
        error_key=const.ERROR_INVALID_RECORD,
        placeholders={"key": key, "message": err.error_message},
    )


# ==============================================================================
# FIELD PARSING
# ==============================================================================


def _parse_kind(raw: str) -> OccurrenceKind:
    kind = OccurrenceKind.try_parse(raw)
    if kind is None:
        raise RuleValidationError(
            field=const.FIELD_KIND,
            error_key=const.ERROR_INVALID_KIND,
            placeholders={"value": raw},
        )
    return kind


def _parse_anchor(raw_date: str | date, raw_time: str | time | None) -> Anchor:
    due_date = dt_parse_date(raw_date)
    if due_date is None:
        raise RuleValidationError(
            field=const.FIELD_ANCHOR,
            error_key=const.ERROR_INVALID_ANCHOR,
            placeholders={"value": str(raw_date)},
        )

    due_time = dt_parse_time(raw_time)
    if raw_time and due_time is None:
        raise RuleValidationError(
            field=const.FIELD_ANCHOR,
            error_key=const.ERROR_INVALID_ANCHOR,
            placeholders={"value": str(raw_time)},
        )
    return Anchor(due_date, due_time)


def _parse_end_condition(
    raw_end_date: str | date | None, max_occurrences: int | None
) -> EndCondition:
    if raw_end_date and max_occurrences is not None:
        raise RuleValidationError(
            field=const.FIELD_END_CONDITION,
            error_key=const.ERROR_CONFLICTING_END_CONDITIONS,
        )

    if max_occurrences is not None:
        return OccurrenceCount(max_occurrences)

    if raw_end_date:
        end_date = dt_parse_date(raw_end_date)
        if end_date is None:
            raise RuleValidationError(
                field=const.FIELD_END_CONDITION,
                error_key=const.ERROR_INVALID_END_CONDITION,
                placeholders={"value": str(raw_end_date)},
            )
        return EndDate(end_date)

    return NoEnd()


def _parse_completed_dates(raw: list[Any] | None) -> frozenset[date]:
    parsed = (dt_parse_date(value) for value in raw or [])
    return frozenset(value for value in parsed if value is not None)


def _build_rule(data: dict[str, Any]) -> RecurrenceRule | None:
    """Build the rule, or None for a one-off reminder.

    Mirrors the app: a reminder repeats only when `is_recurring` is set and a
    pattern is present.
    """
    raw_pattern = data[const.DATA_REMINDER_REPEAT_PATTERN]
    if not data[const.DATA_REMINDER_IS_RECURRING] or not raw_pattern:
        return None

    pattern = RecurrencePattern.try_parse(raw_pattern)
    if pattern is None:
        raise RuleValidationError(
            field=const.FIELD_PATTERN,
            error_key=const.ERROR_INVALID_PATTERN,
            placeholders={"value": raw_pattern},
        )

    interval = data[const.DATA_REMINDER_CUSTOM_INTERVAL]
    if interval is None:
        interval = const.DEFAULT_INTERVAL

    days: frozenset[int] = frozenset()
    raw_days = data[const.DATA_REMINDER_REPEAT_DAYS] or []
    if pattern is RecurrencePattern.WEEKLY:
        days = frozenset(raw_days)
    elif raw_days:
        const.LOGGER.debug(
            "Ignoring repeat_days %s for %s reminder %s",
            raw_days,
            pattern,
            data[const.DATA_REMINDER_ID],
        )

    return RecurrenceRule(
        pattern=pattern,
        interval=interval,
        days_of_week=days,
        end_condition=_parse_end_condition(
            data[const.DATA_REMINDER_RECURRING_END_DATE],
            data[const.DATA_REMINDER_MAX_OCCURRENCES],
        ),
    )


# ==============================================================================
# PUBLIC API
# ==============================================================================


def build_reminder_schedule(record: ReminderData | dict[str, Any]) -> ReminderSchedule:
    """Build engine values from one reminder-store document.

    Args:
        record: Raw reminder dict (see type_defs.ReminderData). Unknown keys
            such as title or notification settings are ignored.

    Returns:
        ReminderSchedule with a validated rule (or None for one-off reminders).

    Raises:
        RuleValidationError: The record is malformed or its rule is invalid.
            `field` names the FIELD_* attribute at fault.
    """
    try:
        data = REMINDER_SCHEMA(dict(record))
    except vol.Invalid as err:
        raise _schema_error(err) from err

    record_id = data[const.DATA_REMINDER_ID]
    rule = _build_rule(data)
    if rule is not None and (errors := rule.validate()):
        raise RuleValidationError.from_errors(errors, {"id": record_id})

    return ReminderSchedule(
        source_id=record_id,
        anchor=_parse_anchor(
            data[const.DATA_REMINDER_DUE_DATE], data[const.DATA_REMINDER_DUE_TIME]
        ),
        rule=rule,
        kind=_parse_kind(data[const.DATA_REMINDER_TYPE]),
        completed=data[const.DATA_REMINDER_COMPLETED],
        completed_dates=_parse_completed_dates(
            data[const.DATA_REMINDER_COMPLETED_DATES]
        ),
    )


def validate_reminder_data(record: ReminderData | dict[str, Any]) -> dict[str, str]:
    """Validate a reminder-store document without raising.

    Returns:
        Dict of errors: {FIELD_*: ERROR_*}. Empty dict means the record can be
        expanded.
    """
    try:
        build_reminder_schedule(record)
    except RuleValidationError as err:
        return {err.field: err.error_key}
    return {}
