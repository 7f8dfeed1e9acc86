"""Type definitions for raw reminder-store records.

The engine itself works on the frozen dataclasses in models.py. These
TypedDicts describe the plain dicts that cross the boundary from the
document store, before data_builders validates and converts them.

IMPORTANT: This file must only import from typing. It is imported by
data_builders.py and by tests.
"""

from __future__ import annotations

from typing import TypedDict

ReminderId = str


class ReminderData(TypedDict, total=False):
    """One reminder document as stored by the app.

    All fields are optional (total=False); data_builders applies defaults.
    Dates are ISO strings ("2024-01-31"), times are "HH:MM" strings.
    """

    id: ReminderId
    type: str  # KIND_* constant (or a KIND_ALIASES key)
    due_date: str
    due_time: str | None
    completed: bool
    is_recurring: bool
    repeat_pattern: str  # PATTERN_* constant
    custom_interval: int
    repeat_days: list[int]  # 0=Sunday ... 6=Saturday
    recurring_end_date: str | None
    max_occurrences: int | None
    completed_dates: list[str]  # ISO dates of completed instances
