"""Space availability and quote endpoints.

Provides:
- GET /spaces/{space_id}/availability: blocked dates for the booking calendar
- POST /spaces/{space_id}/quote: price and compliance preview for a range
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from elaview.domain.availability import AvailabilityUnavailable, load_blocked_dates
from elaview.domain.compliance import check_compliance
from elaview.domain.models import Booking, Space
from elaview.domain.pricing import selected_dates, total_amount
from elaview.domain.range_selection import SelectionState, range_conflicts
from elaview.observability.logging import get_logger

router = APIRouter(prefix="/spaces", tags=["spaces"])

logger = get_logger(__name__)

MAX_RANGE_DAYS = 366


class QuoteRequest(BaseModel):
    start_date: date
    end_date: date
    content_type: list[str] = Field(default_factory=list)


def _get_space(space_id: str) -> Space | None:
    from elaview.infra.db import txn
    from elaview.infra.repositories.spaces_repository import get_space

    with txn() as cur:
        return get_space(cur, space_id)


def _list_bookings(*, space_id: str, statuses: Sequence[str]) -> list[Booking]:
    from elaview.infra.db import txn
    from elaview.infra.repositories.bookings_repository import list_bookings

    with txn() as cur:
        return list_bookings(cur, space_id=space_id, statuses=statuses)


def _require_space(space_id: str) -> Space:
    space = _get_space(space_id)
    if space is None:
        raise HTTPException(status_code=404, detail="Space not found")
    return space


def _blocked_dates(space_id: str) -> frozenset[str]:
    try:
        return load_blocked_dates(_list_bookings, space_id)
    except AvailabilityUnavailable:
        raise HTTPException(
            status_code=503, detail="Availability temporarily unavailable"
        )


@router.get("/{space_id}/availability")
def get_availability(
    space_id: str,
    start_date: date | None = Query(None, description="Window start (YYYY-MM-DD, inclusive)"),
    end_date: date | None = Query(None, description="Window end (YYYY-MM-DD, inclusive)"),
) -> dict:
    """Blocked dates of a space, from its confirmed and active bookings.

    With a window only blocked dates inside it are returned.
    """
    if start_date is not None and end_date is not None:
        if end_date < start_date:
            raise HTTPException(
                status_code=422, detail="end_date must not be before start_date"
            )
        if (end_date - start_date).days + 1 > MAX_RANGE_DAYS:
            raise HTTPException(
                status_code=422,
                detail=f"Date range cannot exceed {MAX_RANGE_DAYS} days",
            )

    _require_space(space_id)
    blocked = _blocked_dates(space_id)

    dates = sorted(blocked)
    if start_date is not None:
        dates = [d for d in dates if d >= start_date.isoformat()]
    if end_date is not None:
        dates = [d for d in dates if d <= end_date.isoformat()]

    return {"space_id": space_id, "blocked_dates": dates}


@router.post("/{space_id}/quote")
def quote(space_id: str, body: QuoteRequest) -> dict:
    """Price, availability and compliance preview for a date range."""
    if body.end_date < body.start_date:
        raise HTTPException(
            status_code=422, detail="end_date must not be before start_date"
        )

    space = _require_space(space_id)
    blocked = _blocked_dates(space_id)

    selection = SelectionState(start=body.start_date, end=body.end_date)
    unavailable = range_conflicts(body.start_date, body.end_date, blocked)
    compliance = check_compliance(body.content_type, space.prohibited_content)

    return {
        "space_id": space_id,
        "available": not unavailable,
        "unavailable_dates": unavailable,
        "selected_dates": selected_dates(selection),
        "total_amount": float(total_amount(selection, space.daily_rate)),
        "conflicts": list(compliance.conflicts),
        "conflict_labels": compliance.conflict_labels,
        "needs_approval": compliance.needs_approval,
        "sensitive_content": compliance.sensitive_content,
    }
