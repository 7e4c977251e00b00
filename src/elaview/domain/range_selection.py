"""Two-click date-range selection with conflict rejection.

Phases:

- ``empty``: nothing picked.
- ``start_picked``: start set, end unset.
- ``range_complete``: both set, ``start <= end``.

Clicking a past or booked day never changes anything. A second click that
would span a blocked date clears the selection and sets ``conflict_error``.
The check runs against the blocked-date snapshot loaded when the dialog
opened; the server re-validates on creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import AbstractSet

from elaview.domain.availability import to_date

CONFLICT_MESSAGE = (
    "Your selection includes unavailable dates. Please choose a different range."
)
INCOMPLETE_MESSAGE = "Please select a start and end date."


class SelectionPhase(str, Enum):
    EMPTY = "empty"
    START_PICKED = "start_picked"
    RANGE_COMPLETE = "range_complete"


@dataclass(frozen=True)
class SelectionState:
    start: date | None = None
    end: date | None = None

    @property
    def phase(self) -> SelectionPhase:
        if self.start is None:
            return SelectionPhase.EMPTY
        if self.end is None:
            return SelectionPhase.START_PICKED
        return SelectionPhase.RANGE_COMPLETE

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    def ordered(self) -> tuple[date, date] | None:
        """Return (earliest, latest) endpoints, or None when incomplete."""
        if self.start is None or self.end is None:
            return None
        return (min(self.start, self.end), max(self.start, self.end))


EMPTY_SELECTION = SelectionState()


def range_conflicts(
    start: date,
    end: date,
    blocked_dates: AbstractSet[str],
) -> list[str]:
    """Return the blocked ISO dates inside [start, end], sorted."""
    return sorted(d for d in blocked_dates if start <= to_date(d) <= end)


class RangeSelector:
    """Selection state machine for one dialog instance."""

    def __init__(self, blocked_dates: AbstractSet[str], *, today: date) -> None:
        self.blocked_dates = frozenset(blocked_dates)
        self.today = today
        self.selection = EMPTY_SELECTION
        self.hover_date: date | None = None
        self.conflict_error: str | None = None

    @property
    def phase(self) -> SelectionPhase:
        return self.selection.phase

    @property
    def can_continue(self) -> bool:
        return self.conflict_error is None and self.selection.is_complete

    def is_clickable(self, day: date) -> bool:
        return day >= self.today and day.isoformat() not in self.blocked_dates

    def select(self, day: date) -> bool:
        """Apply a click on ``day``. Returns False if the click was ignored."""
        if not self.is_clickable(day):
            return False

        self.conflict_error = None
        start = self.selection.start

        if self.phase is not SelectionPhase.START_PICKED:
            self.selection = SelectionState(start=day)
        elif day < start:
            self.selection = SelectionState(start=day)
        elif range_conflicts(start, day, self.blocked_dates):
            self.selection = EMPTY_SELECTION
            self.conflict_error = CONFLICT_MESSAGE
        else:
            self.selection = SelectionState(start=start, end=day)

        if self.phase is not SelectionPhase.START_PICKED:
            self.hover_date = None
        return True

    def hover(self, day: date | None) -> None:
        """Record the preview day; ignored unless only a start is picked."""
        if self.phase is SelectionPhase.START_PICKED:
            self.hover_date = day

    def clear_hover(self) -> None:
        self.hover_date = None

    def require_complete(self) -> bool:
        """Gate for leaving the date step.

        An incomplete selection sets ``INCOMPLETE_MESSAGE``. An existing
        conflict error is left as is.
        """
        if self.conflict_error is not None:
            return False
        if not self.selection.is_complete:
            self.conflict_error = INCOMPLETE_MESSAGE
            return False
        return True

    def replace_blocked_dates(self, blocked_dates: AbstractSet[str]) -> None:
        self.blocked_dates = frozenset(blocked_dates)

    def reset(self) -> None:
        self.selection = EMPTY_SELECTION
        self.hover_date = None
        self.conflict_error = None
