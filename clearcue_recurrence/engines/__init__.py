"""Engine modules for the ClearCue recurrence package.

Contains specialized computation engines:
- schedule_engine: Next-occurrence arithmetic and rule descriptions
- expansion_engine: Bounded expansion of a rule into occurrences
- priority_engine: Dominant reminder kind per calendar day
- overdue_engine: Overdue classification against an explicit clock
"""

# Use relative imports within package to avoid mypy module resolution issues
from .expansion_engine import (
    NextOccurrenceCalculator,
    OccurrenceExpander,
    expand_occurrences,
    expand_reminder,
    has_missed_occurrences,
    next_pending_occurrence,
    occurs_on,
)
from .overdue_engine import OverdueEngine, is_overdue
from .priority_engine import PriorityEngine, pick_dominant
from .schedule_engine import ScheduleEngine, describe_rule, next_occurrence

__all__ = [
    "NextOccurrenceCalculator",
    "OccurrenceExpander",
    "OverdueEngine",
    "PriorityEngine",
    "ScheduleEngine",
    "describe_rule",
    "expand_occurrences",
    "expand_reminder",
    "has_missed_occurrences",
    "is_overdue",
    "next_occurrence",
    "next_pending_occurrence",
    "occurs_on",
    "pick_dominant",
]
