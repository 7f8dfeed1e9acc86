# File: __init__.py
"""Recurrence expansion engine for the ClearCue reminder manager.

Turns a reminder's recurrence rule and anchor date into a finite, ordered
list of concrete occurrences, and classifies occurrences for display
(dominant kind per day) and lateness (overdue).

Key Features:
- Hourly/daily/weekly/monthly/yearly rules plus weekdays and weekends.
- Month-end and Feb 29 clamping without drift.
- Bounded expansion with a hard iteration ceiling.
- Raw reminder-store records validated with voluptuous.
"""

from __future__ import annotations

from .data_builders import build_reminder_schedule, validate_reminder_data
from .engines import (
    OccurrenceExpander,
    OverdueEngine,
    PriorityEngine,
    ScheduleEngine,
    describe_rule,
    expand_occurrences,
    expand_reminder,
    has_missed_occurrences,
    is_overdue,
    next_occurrence,
    next_pending_occurrence,
    occurs_on,
    pick_dominant,
)
from .exceptions import (
    ExpansionInvariantError,
    IterationCeilingError,
    NonMonotonicOccurrenceError,
    RecurrenceError,
    RuleValidationError,
)
from .models import (
    Anchor,
    EndCondition,
    EndDate,
    ExpansionWindow,
    NoEnd,
    Occurrence,
    OccurrenceCount,
    OccurrenceKind,
    RecurrencePattern,
    RecurrenceRule,
    ReminderSchedule,
)

__all__ = [
    "Anchor",
    "EndCondition",
    "EndDate",
    "ExpansionInvariantError",
    "ExpansionWindow",
    "IterationCeilingError",
    "NoEnd",
    "NonMonotonicOccurrenceError",
    "Occurrence",
    "OccurrenceCount",
    "OccurrenceExpander",
    "OccurrenceKind",
    "OverdueEngine",
    "PriorityEngine",
    "RecurrenceError",
    "RecurrencePattern",
    "RecurrenceRule",
    "ReminderSchedule",
    "RuleValidationError",
    "ScheduleEngine",
    "build_reminder_schedule",
    "describe_rule",
    "expand_occurrences",
    "expand_reminder",
    "has_missed_occurrences",
    "is_overdue",
    "next_occurrence",
    "next_pending_occurrence",
    "occurs_on",
    "pick_dominant",
    "validate_reminder_data",
]
