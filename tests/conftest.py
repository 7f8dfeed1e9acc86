"""Shared fixtures for recurrence engine tests.

Everything here is pure: fixed dates, rule factories, no clock reads.
Reference calendar: 2024-01-01 is a Monday, 2024 is a leap year.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import date, time
from zoneinfo import ZoneInfo

import pytest

from clearcue_recurrence.engines.expansion_engine import OccurrenceExpander
from clearcue_recurrence.models import (
    Anchor,
    EndCondition,
    NoEnd,
    RecurrencePattern,
    RecurrenceRule,
)
from clearcue_recurrence.utils import dt_utils

RuleFactory = Callable[..., RecurrenceRule]


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Iterator[None]:
    """Restore the module-level local zone after each test."""
    previous = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(previous)


@pytest.fixture
def make_rule() -> RuleFactory:
    """Return a factory for RecurrenceRule with readable keyword arguments."""

    def _make(
        pattern: RecurrencePattern = RecurrencePattern.DAILY,
        interval: int = 1,
        days: set[int] | None = None,
        end: EndCondition | None = None,
    ) -> RecurrenceRule:
        return RecurrenceRule(
            pattern=pattern,
            interval=interval,
            days_of_week=frozenset(days or ()),
            end_condition=end if end is not None else NoEnd(),
        )

    return _make


@pytest.fixture
def expander() -> OccurrenceExpander:
    """Expander with the default calculator and ceiling."""
    return OccurrenceExpander()


@pytest.fixture
def monday_anchor() -> Anchor:
    """All-day anchor on Monday 2024-01-01."""
    return Anchor(date(2024, 1, 1))


@pytest.fixture
def timed_anchor() -> Anchor:
    """Anchor on Monday 2024-01-01 at 09:30."""
    return Anchor(date(2024, 1, 1), time(9, 30))


@pytest.fixture
def berlin_tz() -> ZoneInfo:
    """Return a local zone with a non-zero UTC offset."""
    return ZoneInfo("Europe/Berlin")
