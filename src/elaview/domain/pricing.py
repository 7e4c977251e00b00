"""Booking price: number of selected days times the daily rate."""

from __future__ import annotations

from decimal import Decimal

from elaview.domain.availability import expand_booking
from elaview.domain.range_selection import SelectionState


def selected_dates(selection: SelectionState) -> list[str]:
    """ISO dates of the inclusive selection, earliest first.

    Empty unless both endpoints are set.
    """
    bounds = selection.ordered()
    if bounds is None:
        return []
    return expand_booking(*bounds)


def total_amount(
    selection: SelectionState,
    daily_rate: Decimal | int | float | None,
) -> Decimal:
    """Flat per-day total. Zero when incomplete or the rate is missing/zero."""
    days = selected_dates(selection)
    if not days or not daily_rate:
        return Decimal(0)
    return len(days) * Decimal(str(daily_rate))
