"""Overdue Engine - decides whether an occurrence is late.

Policy:
- A completed occurrence is never overdue.
- With a time of day: overdue once `date + time` is strictly before now.
- Without one: due at end of day (23:59:59.999), so an all-day reminder for
  today only becomes overdue after midnight.

`now` is always passed in; aware values are converted into the configured
local zone first (see dt_utils.set_default_timezone).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ..models import Occurrence
from ..utils.dt_utils import to_local_naive


class OverdueEngine:
    """Pure overdue classification. All methods are static."""

    @staticmethod
    def due_instant(occurrence: Occurrence) -> datetime:
        """Instant after which the occurrence counts as late."""
        return occurrence.due_at

    @staticmethod
    def is_overdue(occurrence: Occurrence, now: datetime) -> bool:
        """Check a single occurrence against `now`.

        Args:
            occurrence: The occurrence to classify.
            now: Current instant; naive values are taken as local wall time.

        Returns:
            True if not completed and its due instant has passed.
        """
        if occurrence.completed:
            return False
        return occurrence.due_at < to_local_naive(now)

    @staticmethod
    def overdue_occurrences(
        occurrences: Iterable[Occurrence], now: datetime
    ) -> list[Occurrence]:
        """Filter to the overdue occurrences, preserving input order."""
        local_now = to_local_naive(now)
        return [
            occ
            for occ in occurrences
            if not occ.completed and occ.due_at < local_now
        ]


def is_overdue(occurrence: Occurrence, now: datetime) -> bool:
    """Convenience wrapper for OverdueEngine.is_overdue."""
    return OverdueEngine.is_overdue(occurrence, now)
