"""Calendar day classification for the booking dialog."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import AbstractSet

from elaview.domain.range_selection import SelectionState


class DayStatus(str, Enum):
    PAST = "past"
    BOOKED = "booked"
    SELECTED_START = "selected-start"
    SELECTED_END = "selected-end"
    SELECTED_MIDDLE = "selected-middle"
    IN_RANGE = "in-range"
    AVAILABLE = "available"


UNSELECTABLE = frozenset({DayStatus.PAST, DayStatus.BOOKED})


def classify_day(
    day: date,
    selection: SelectionState,
    blocked_dates: AbstractSet[str],
    *,
    today: date,
    hover: date | None = None,
) -> DayStatus:
    """Classify ``day`` for display and interaction.

    Rules apply in order and the first match wins: past, booked, selection
    endpoints, inside a complete selection, inside the hover preview,
    available. The hover preview only applies while the end is unset and the
    hovered day lies after the start.
    """
    start, end = selection.start, selection.end

    if day < today:
        return DayStatus.PAST
    if day.isoformat() in blocked_dates:
        return DayStatus.BOOKED
    if start is not None and day == start:
        return DayStatus.SELECTED_START
    if end is not None and day == end:
        return DayStatus.SELECTED_END
    if start is not None and end is not None and start <= day <= end:
        return DayStatus.SELECTED_MIDDLE
    if start is not None and end is None and hover is not None and hover > start:
        if start <= day <= hover:
            return DayStatus.IN_RANGE
    return DayStatus.AVAILABLE


def is_selectable(status: DayStatus) -> bool:
    return status not in UNSELECTABLE


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the month grid.

    ``in_month`` False means the day belongs to a neighbouring month and is
    rendered with reduced emphasis; its status is unaffected.
    """

    date: date
    status: DayStatus
    in_month: bool
    is_today: bool
    disabled: bool


def shift_month(month: date, delta: int) -> date:
    """Return the first day of the month ``delta`` months from ``month``."""
    index = month.year * 12 + (month.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def month_grid(
    month: date,
    selection: SelectionState,
    blocked_dates: AbstractSet[str],
    *,
    today: date,
    hover: date | None = None,
    loading: bool = False,
) -> list[list[CalendarDay]]:
    """Build the weeks (Sunday first) that cover ``month``.

    Every day is disabled while availability is loading.
    """
    first = month.replace(day=1)
    last = shift_month(first, 1) - timedelta(days=1)

    # date.weekday(): Monday=0 .. Sunday=6
    grid_start = first - timedelta(days=(first.weekday() + 1) % 7)
    grid_end = last + timedelta(days=(5 - last.weekday()) % 7)

    weeks: list[list[CalendarDay]] = []
    week: list[CalendarDay] = []
    current = grid_start
    while current <= grid_end:
        status = classify_day(
            current, selection, blocked_dates, today=today, hover=hover
        )
        week.append(
            CalendarDay(
                date=current,
                status=status,
                in_month=current.month == first.month,
                is_today=current == today,
                disabled=loading or not is_selectable(status),
            )
        )
        if len(week) == 7:
            weeks.append(week)
            week = []
        current += timedelta(days=1)
    return weeks
