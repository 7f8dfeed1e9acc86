"""Exceptions raised by the recurrence engine.

Two families, kept apart so callers can tell bad input from a broken engine:

- RuleValidationError: the caller supplied an invalid rule, window or record.
  Fix the input; retrying is pointless.
- ExpansionInvariantError: the engine violated its own guarantees (a
  non-advancing next date, or the iteration ceiling was hit). Always a defect.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class RecurrenceError(Exception):
    """Base class for all recurrence engine errors."""


class RuleValidationError(RecurrenceError):
    """Validation error carrying the offending field.

    Attributes:
        field: FIELD_* constant naming the rule/window attribute that failed
        error_key: ERROR_* constant describing the failure
        placeholders: Optional values for building a user-facing message

    Example:
        raise RuleValidationError(
            field=const.FIELD_INTERVAL,
            error_key=const.ERROR_INVALID_INTERVAL,
            placeholders={"value": "0"},
        )
    """

    def __init__(
        self,
        field: str,
        error_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize RuleValidationError.

        Args:
            field: The FIELD_* constant for the attribute that failed validation
            error_key: The ERROR_* constant for the failure
            placeholders: Optional dict of message placeholders
        """
        self.field = field
        self.error_key = error_key
        self.placeholders = placeholders or {}
        detail = ", ".join(f"{k}={v}" for k, v in self.placeholders.items())
        message = f"{field}: {error_key}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @classmethod
    def from_errors(
        cls,
        errors: dict[str, str],
        placeholders: dict[str, str] | None = None,
    ) -> RuleValidationError:
        """Build from the first entry of a `validate()` result dict."""
        field, error_key = next(iter(errors.items()))
        return cls(field=field, error_key=error_key, placeholders=placeholders)


class ExpansionInvariantError(RecurrenceError):
    """The expansion loop detected a violation of its own invariants."""


class NonMonotonicOccurrenceError(ExpansionInvariantError):
    """The calculator returned a date that is not strictly after the current one.

    Attributes:
        current: The occurrence instant passed to the calculator
        proposed: The instant the calculator returned
    """

    def __init__(self, current: datetime, proposed: datetime) -> None:
        """Initialize NonMonotonicOccurrenceError."""
        self.current = current
        self.proposed = proposed
        super().__init__(
            f"Next occurrence {proposed.isoformat()} is not after "
            f"{current.isoformat()}"
        )


class IterationCeilingError(ExpansionInvariantError):
    """The expansion needed more calculator calls than the hard ceiling allows.

    Attributes:
        ceiling: The configured maximum number of calculator calls
        last: The last instant reached before giving up
    """

    def __init__(self, ceiling: int, last: datetime) -> None:
        """Initialize IterationCeilingError."""
        self.ceiling = ceiling
        self.last = last
        super().__init__(
            f"Expansion exceeded {ceiling} iterations (last={last.isoformat()})"
        )
