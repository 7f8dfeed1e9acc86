"""Priority Engine - picks the kind shown for a calendar day.

When several reminders share a day, the day marker shows the most important
kind: note < task < event < medication < bill.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import ClassVar

from ..models import Occurrence, OccurrenceKind


class PriorityEngine:
    """Stateless kind ranking. All methods are static."""

    RANKS: ClassVar[dict[OccurrenceKind, int]] = {
        OccurrenceKind.NOTE: 0,
        OccurrenceKind.TASK: 1,
        OccurrenceKind.EVENT: 2,
        OccurrenceKind.MEDICATION: 3,
        OccurrenceKind.BILL: 4,
    }

    @staticmethod
    def rank(kind: OccurrenceKind) -> int:
        return PriorityEngine.RANKS[kind]

    @staticmethod
    def pick_dominant(kinds: Iterable[OccurrenceKind]) -> OccurrenceKind:
        """Return the highest-ranked kind.

        Raises:
            ValueError: `kinds` is empty.
        """
        kinds = list(kinds)
        if not kinds:
            raise ValueError("pick_dominant() needs at least one kind")
        return max(kinds, key=PriorityEngine.rank)

    @staticmethod
    def dominant_kind_by_day(
        occurrences: Iterable[Occurrence],
    ) -> dict[date, OccurrenceKind]:
        """Group occurrences by calendar day and keep the dominant kind of each.

        Days appear in first-seen order.
        """
        by_day: dict[date, OccurrenceKind] = {}
        for occ in occurrences:
            current = by_day.get(occ.date)
            if current is None or PriorityEngine.rank(occ.kind) > PriorityEngine.rank(
                current
            ):
                by_day[occ.date] = occ.kind
        return by_day


def pick_dominant(kinds: Iterable[OccurrenceKind]) -> OccurrenceKind:
    """Convenience wrapper for PriorityEngine.pick_dominant."""
    return PriorityEngine.pick_dominant(kinds)
