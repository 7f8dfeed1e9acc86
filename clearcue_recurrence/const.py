# File: const.py
"""Constants for the ClearCue recurrence engine.

This file centralizes storage field keys, pattern and kind names, validation
error keys, defaults and safety limits so every engine reads the same values.
"""

from datetime import time
import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Recurrence patterns (store values)
# ------------------------------------------------------------------------------------------------
PATTERN_HOURLY = "hourly"
PATTERN_DAILY = "daily"
PATTERN_WEEKLY = "weekly"
PATTERN_MONTHLY = "monthly"
PATTERN_YEARLY = "yearly"
PATTERN_WEEKDAYS = "weekdays"
PATTERN_WEEKENDS = "weekends"

# ------------------------------------------------------------------------------------------------
# Occurrence kinds (store values)
# ------------------------------------------------------------------------------------------------
KIND_NOTE = "note"
KIND_TASK = "task"
KIND_EVENT = "event"
KIND_MEDICATION = "medication"
KIND_BILL = "bill"

# Store type names (ReminderType) that differ from the kind names
KIND_ALIASES: dict[str, str] = {
    "med": KIND_MEDICATION,
    "reminder": KIND_TASK,
}

DEFAULT_KIND = KIND_TASK

# ------------------------------------------------------------------------------------------------
# Weekdays (0=Sunday ... 6=Saturday, store convention)
# ------------------------------------------------------------------------------------------------
SUNDAY = 0
MONDAY = 1
TUESDAY = 2
WEDNESDAY = 3
THURSDAY = 4
FRIDAY = 5
SATURDAY = 6

WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

WEEKEND_DAYS: frozenset[int] = frozenset({SATURDAY, SUNDAY})
WORKING_DAYS: frozenset[int] = frozenset({MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY})

DAYS_PER_WEEK = 7

# ------------------------------------------------------------------------------------------------
# Due instants
# ------------------------------------------------------------------------------------------------
# Occurrences without a time of day are due at the last millisecond of the day
END_OF_DAY_TIME = time(23, 59, 59, 999000)
START_OF_DAY_TIME = time.min

# ------------------------------------------------------------------------------------------------
# Expansion defaults and safety limits
# ------------------------------------------------------------------------------------------------
DEFAULT_INTERVAL = 1
DEFAULT_MAX_OCCURRENCES = 50

# Hard ceiling on calculator calls per expansion
MAX_EXPANSION_ITERATIONS = 10_000

# ------------------------------------------------------------------------------------------------
# Reminder store record keys
# ------------------------------------------------------------------------------------------------
DATA_REMINDER_ID = "id"
DATA_REMINDER_TYPE = "type"
DATA_REMINDER_DUE_DATE = "due_date"
DATA_REMINDER_DUE_TIME = "due_time"
DATA_REMINDER_COMPLETED = "completed"
DATA_REMINDER_IS_RECURRING = "is_recurring"
DATA_REMINDER_REPEAT_PATTERN = "repeat_pattern"
DATA_REMINDER_CUSTOM_INTERVAL = "custom_interval"
DATA_REMINDER_REPEAT_DAYS = "repeat_days"
DATA_REMINDER_RECURRING_END_DATE = "recurring_end_date"
DATA_REMINDER_MAX_OCCURRENCES = "max_occurrences"
DATA_REMINDER_COMPLETED_DATES = "completed_dates"

# ------------------------------------------------------------------------------------------------
# Validation fields (reported on RuleValidationError.field)
# ------------------------------------------------------------------------------------------------
FIELD_PATTERN = "pattern"
FIELD_INTERVAL = "interval"
FIELD_DAYS_OF_WEEK = "days_of_week"
FIELD_END_CONDITION = "end_condition"
FIELD_ANCHOR = "anchor"
FIELD_WINDOW = "window"
FIELD_MAX_COUNT = "max_count"
FIELD_KIND = "kind"

# ------------------------------------------------------------------------------------------------
# Validation error keys
# ------------------------------------------------------------------------------------------------
ERROR_INVALID_PATTERN = "invalid_pattern"
ERROR_INVALID_INTERVAL = "invalid_interval"
ERROR_DAYS_OUT_OF_RANGE = "days_of_week_out_of_range"
ERROR_DAYS_NOT_ALLOWED = "days_of_week_not_allowed"
ERROR_INVALID_OCCURRENCE_COUNT = "invalid_occurrence_count"
ERROR_CONFLICTING_END_CONDITIONS = "conflicting_end_conditions"
ERROR_INVALID_END_CONDITION = "invalid_end_condition"
ERROR_INVALID_ANCHOR = "invalid_anchor"
ERROR_INVALID_WINDOW = "invalid_window"
ERROR_INVALID_MAX_COUNT = "invalid_max_count"
ERROR_INVALID_KIND = "invalid_kind"
ERROR_INVALID_RECORD = "invalid_record"
