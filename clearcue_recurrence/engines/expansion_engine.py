"""Expansion Engine - turns a rule + anchor into a bounded occurrence list.

Drives a next-occurrence calculator in a loop and stops on the first of:
- the candidate date is past `window.end`
- `window.max_count` occurrences were emitted
- the candidate date is past the rule's EndDate
- the rule's OccurrenceCount is reached (counted from the anchor, so
  instances skipped before `window.start` still count)

Two internal guarantees are enforced rather than trusted:
- every calculator result must be strictly later than its input
  (NonMonotonicOccurrenceError otherwise)
- at most `max_iterations` calculator calls per expansion
  (IterationCeilingError otherwise)

Both are logged at error level and raised; they mean a defect, never bad input.

ARCHITECTURE: No state shared between calls, no clock reads. `now`/`after`
values are always passed in by the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from datetime import date, datetime
from typing import Any

from .. import const
from ..data_builders import build_reminder_schedule
from ..exceptions import (
    IterationCeilingError,
    NonMonotonicOccurrenceError,
    RuleValidationError,
)
from ..models import (
    Anchor,
    ExpansionWindow,
    Occurrence,
    OccurrenceKind,
    RecurrencePattern,
    RecurrenceRule,
)
from ..type_defs import ReminderData
from ..utils.dt_utils import start_of_day, to_local_naive
from .schedule_engine import ScheduleEngine

# (current, rule, anchor) -> next
NextOccurrenceCalculator = Callable[
    [datetime, RecurrenceRule, datetime | None], datetime
]


class OccurrenceExpander:
    """Bounded occurrence expansion.

    Args:
        calculator: Next-occurrence function. Defaults to
            ScheduleEngine.next_occurrence. A custom calculator disables the
            arithmetic fast-forward, so every step goes through it.
        max_iterations: Hard ceiling on calculator calls per expansion.
    """

    def __init__(
        self,
        calculator: NextOccurrenceCalculator | None = None,
        max_iterations: int = const.MAX_EXPANSION_ITERATIONS,
    ) -> None:
        self._calculator = calculator or ScheduleEngine.next_occurrence
        self._fast_forward = calculator is None
        self._max_iterations = max_iterations

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    # =========================================================================
    # Public API
    # =========================================================================

    def expand(
        self,
        anchor: Anchor,
        rule: RecurrenceRule | None,
        window: ExpansionWindow,
        *,
        source_id: str = "",
        kind: OccurrenceKind = OccurrenceKind.TASK,
        completed: bool = False,
        completed_dates: Iterable[date] = (),
    ) -> list[Occurrence]:
        """Expand a reminder into the occurrences inside `window`.

        Args:
            anchor: Date (and optional time) the rule is defined relative to.
            rule: Recurrence rule, or None for a one-off reminder.
            window: Inclusive date range plus a count cap.
            source_id: Opaque id copied onto every occurrence.
            kind: Reminder kind copied onto every occurrence.
            completed: Completion flag of a one-off reminder.
            completed_dates: Days on which a recurring reminder was completed.

        Returns:
            Occurrences in strictly ascending order, without duplicates.

        Raises:
            RuleValidationError: Invalid anchor, rule or window.
            NonMonotonicOccurrenceError: The calculator did not advance.
            IterationCeilingError: More than `max_iterations` calculator calls.
        """
        self._validate(anchor, rule, window)
        done = frozenset(completed_dates)

        if rule is None:
            if window.is_empty or not window.start <= anchor.date <= window.end:
                return []
            return [
                Occurrence(
                    source_id=source_id,
                    date=anchor.date,
                    time=anchor.time,
                    kind=kind,
                    completed=completed or anchor.date in done,
                )
            ]

        if window.is_empty:
            return []

        results: list[Occurrence] = []
        for index, instant in self._iter_instants(anchor, rule, window.start):
            if instant.date() > window.end:
                const.LOGGER.debug(
                    "Expansion of %s stopped at window end %s", source_id, window.end
                )
                break

            results.append(
                self._build_occurrence(
                    anchor, rule, instant, index, source_id, kind, done
                )
            )

            if len(results) >= window.max_count:
                const.LOGGER.debug(
                    "Expansion of %s stopped at max_count %s",
                    source_id,
                    window.max_count,
                )
                break

        return results

    def next_pending_occurrence(
        self,
        anchor: Anchor,
        rule: RecurrenceRule | None,
        after: datetime,
        *,
        source_id: str = "",
        kind: OccurrenceKind = OccurrenceKind.TASK,
        completed: bool = False,
        completed_dates: Iterable[date] = (),
    ) -> Occurrence | None:
        """Return the first open occurrence that is not yet overdue at `after`.

        This is what a notification scheduler arms next: the first instance
        whose due instant is at or after `after` and whose day is not in
        `completed_dates`.

        Returns:
            The occurrence, or None if the rule has ended (or the one-off
            reminder is done or already past due).
        """
        self._validate(anchor, rule, None)
        done = frozenset(completed_dates)
        local_after = to_local_naive(after)

        if rule is None:
            occurrence = Occurrence(
                source_id=source_id,
                date=anchor.date,
                time=anchor.time,
                kind=kind,
                completed=completed or anchor.date in done,
            )
            if occurrence.completed or occurrence.due_at < local_after:
                return None
            return occurrence

        for index, instant in self._iter_instants(anchor, rule, local_after.date()):
            occurrence = self._build_occurrence(
                anchor, rule, instant, index, source_id, kind, done
            )
            if not occurrence.completed and occurrence.due_at >= local_after:
                return occurrence

        return None

    def has_missed_occurrences(
        self,
        anchor: Anchor,
        rule: RecurrenceRule | None,
        last_done: datetime,
        now: datetime,
    ) -> bool:
        """Check whether any instance fell strictly between two completions.

        Used for streaks: a streak survives when nothing was scheduled between
        the previous completion and this one.

        Examples:
            Daily: last=Jan 1 09:00, now=Jan 2 09:00 -> False
            Daily: last=Jan 1 09:00, now=Jan 3 09:00 -> True (Jan 2 missed)
            Every 3 days from Jan 1: last=Jan 1, now=Jan 3 -> False
        """
        if rule is None:
            return False
        self._validate(anchor, rule, None)

        start = to_local_naive(last_done)
        end = to_local_naive(now)
        if end <= start:
            return False

        for _index, instant in self._iter_instants(anchor, rule, start.date()):
            if instant >= end:
                return False
            if instant > start:
                return True
        return False

    def occurs_on(
        self, day: date, anchor: Anchor, rule: RecurrenceRule | None
    ) -> bool:
        """Whether the reminder has an instance on calendar day `day`."""
        self._validate(anchor, rule, None)
        if rule is None:
            return day == anchor.date
        first = next(self._iter_instants(anchor, rule, day), None)
        return first is not None and first[1].date() == day

    def expand_reminder(
        self, record: ReminderData | dict[str, Any], window: ExpansionWindow
    ) -> list[Occurrence]:
        """Expand a raw reminder-store record.

        Raises:
            RuleValidationError: The record or its rule is invalid.
        """
        schedule = build_reminder_schedule(record)
        return self.expand(
            schedule.anchor,
            schedule.rule,
            window,
            source_id=schedule.source_id,
            kind=schedule.kind,
            completed=schedule.completed,
            completed_dates=schedule.completed_dates,
        )

    # =========================================================================
    # Private helpers
    # =========================================================================

    @staticmethod
    def _validate(
        anchor: Anchor,
        rule: RecurrenceRule | None,
        window: ExpansionWindow | None,
    ) -> None:
        """Raise RuleValidationError for the first invalid input, if any."""
        if not isinstance(anchor.date, date) or isinstance(anchor.date, datetime):
            raise RuleValidationError(
                field=const.FIELD_ANCHOR,
                error_key=const.ERROR_INVALID_ANCHOR,
                placeholders={"value": str(anchor.date)},
            )
        if window is not None and (errors := window.validate()):
            raise RuleValidationError.from_errors(errors)
        if rule is not None and (errors := rule.validate()):
            raise RuleValidationError.from_errors(errors)

    @staticmethod
    def _build_occurrence(
        anchor: Anchor,
        rule: RecurrenceRule,
        instant: datetime,
        index: int,
        source_id: str,
        kind: OccurrenceKind,
        done: frozenset[date],
    ) -> Occurrence:
        # All-day reminders stay all-day unless the rule itself moves the time
        timed = anchor.time is not None or rule.pattern is RecurrencePattern.HOURLY
        return Occurrence(
            source_id=source_id,
            date=instant.date(),
            time=instant.time() if timed else None,
            kind=kind,
            completed=instant.date() in done,
            index=index,
        )

    def _iter_instants(
        self, anchor: Anchor, rule: RecurrenceRule, from_day: date
    ) -> Iterator[tuple[int, datetime]]:
        """Yield (index, instant) for every instance on or after `from_day`.

        `index` counts from the first instance at or after the anchor. The
        rule's end condition is applied here; window bounds are the caller's.
        """
        anchor_dt = anchor.starts_at
        calls = 0

        def advance(current: datetime) -> datetime:
            nonlocal calls
            calls += 1
            if calls > self._max_iterations:
                const.LOGGER.error(
                    "Expansion exceeded %s calculator calls for %s (last=%s)",
                    self._max_iterations,
                    rule,
                    current,
                )
                raise IterationCeilingError(self._max_iterations, current)

            proposed = self._calculator(current, rule, anchor_dt)
            if proposed <= current:
                const.LOGGER.error(
                    "Calculator returned non-advancing occurrence %s after %s for %s",
                    proposed,
                    current,
                    rule,
                )
                raise NonMonotonicOccurrenceError(current, proposed)
            return proposed

        index = 0
        current = anchor_dt
        if not ScheduleEngine.matches_day(anchor_dt.date(), rule):
            current = advance(current)

        # === Skip to the window ===
        cycle = ScheduleEngine.repeat_cycle(rule) if self._fast_forward else None
        if cycle is not None and current.date() < from_day:
            span, per_span = cycle
            periods = (start_of_day(from_day) - current) // span
            if periods > 0:
                const.LOGGER.debug(
                    "Fast-forwarding %s instances of %s to %s",
                    periods * per_span,
                    rule,
                    from_day,
                )
                current += span * periods
                index += periods * per_span

        while current.date() < from_day:
            if _rule_exhausted(rule, current, index):
                return
            current = advance(current)
            index += 1

        # === Emit ===
        count = rule.max_occurrences
        while True:
            if _rule_exhausted(rule, current, index):
                const.LOGGER.debug("Rule %s ended at %s (index %s)", rule, current, index)
                return
            yield index, current
            if count is not None and index + 1 >= count:
                return
            current = advance(current)
            index += 1


def _rule_exhausted(rule: RecurrenceRule, instant: datetime, index: int) -> bool:
    """Whether `instant` (the index-th instance) is past the rule's end."""
    end_date = rule.end_date
    if end_date is not None and instant.date() > end_date:
        return True
    count = rule.max_occurrences
    return count is not None and index >= count


# =============================================================================
# Module-level convenience functions
# =============================================================================

_DEFAULT_EXPANDER = OccurrenceExpander()


def expand_occurrences(
    anchor: Anchor,
    rule: RecurrenceRule | None,
    window: ExpansionWindow,
    **kwargs: Any,
) -> list[Occurrence]:
    """Expand with the default calculator (see OccurrenceExpander.expand)."""
    return _DEFAULT_EXPANDER.expand(anchor, rule, window, **kwargs)


def expand_reminder(
    record: ReminderData | dict[str, Any], window: ExpansionWindow
) -> list[Occurrence]:
    """Expand a raw store record (see OccurrenceExpander.expand_reminder)."""
    return _DEFAULT_EXPANDER.expand_reminder(record, window)


def next_pending_occurrence(
    anchor: Anchor,
    rule: RecurrenceRule | None,
    after: datetime,
    **kwargs: Any,
) -> Occurrence | None:
    """First open, not-yet-due occurrence (see OccurrenceExpander)."""
    return _DEFAULT_EXPANDER.next_pending_occurrence(anchor, rule, after, **kwargs)


def has_missed_occurrences(
    anchor: Anchor,
    rule: RecurrenceRule | None,
    last_done: datetime,
    now: datetime,
) -> bool:
    """Streak check (see OccurrenceExpander.has_missed_occurrences)."""
    return _DEFAULT_EXPANDER.has_missed_occurrences(anchor, rule, last_done, now)


def occurs_on(day: date, anchor: Anchor, rule: RecurrenceRule | None) -> bool:
    """Whether the reminder has an instance on `day`."""
    return _DEFAULT_EXPANDER.occurs_on(day, anchor, rule)
