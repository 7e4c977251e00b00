"""Booking creation endpoint.

POST /bookings accepts the payload produced by the booking dialog and
creates a pending booking after re-checking availability on the server.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from elaview.domain.availability import expand_booking
from elaview.domain.booking_conflict import BookingConflictError
from elaview.domain.bookings import InvalidBookingRange, SpaceNotFound, create_booking
from elaview.observability.logging import get_logger

router = APIRouter(prefix="/bookings", tags=["bookings"])

logger = get_logger(__name__)


class CreateBookingRequest(BaseModel):
    """Booking dialog payload plus the target space."""

    space_id: str
    campaign_name: str = Field(min_length=1)
    brand_name: str = Field(min_length=1)
    content_type: list[str] = Field(default_factory=list)
    content_description: str = ""
    message: str = ""
    start_date: date
    end_date: date
    selected_dates: list[date] = Field(default_factory=list)
    total_amount: Decimal | None = None
    # Advisory; the server recomputes both.
    needs_approval: bool | None = None
    sensitive_content: bool | None = None


@router.post("", status_code=201)
def post_booking(body: CreateBookingRequest) -> dict:
    """Create a pending booking.

    Returns 409 when the range now overlaps a confirmed or active booking.
    """
    if not body.campaign_name.strip() or not body.brand_name.strip():
        raise HTTPException(
            status_code=422, detail="campaign_name and brand_name are required"
        )

    # Optional; when sent it must be exactly the inclusive range.
    if body.selected_dates and body.start_date <= body.end_date:
        sent = sorted(d.isoformat() for d in body.selected_dates)
        if sent != expand_booking(body.start_date, body.end_date):
            logger.warning(
                "selected dates do not match range",
                extra={
                    "extra_fields": {
                        "space_id": body.space_id,
                        "start_date": body.start_date.isoformat(),
                        "end_date": body.end_date.isoformat(),
                        "selected_days": len(sent),
                    }
                },
            )
            raise HTTPException(status_code=422, detail="selected_dates_mismatch")

    try:
        created = create_booking(
            space_id=body.space_id,
            start_date=body.start_date,
            end_date=body.end_date,
            campaign_name=body.campaign_name,
            brand_name=body.brand_name,
            content_type=body.content_type,
            content_description=body.content_description,
            message=body.message,
            client_total=body.total_amount,
        )
    except SpaceNotFound:
        raise HTTPException(status_code=404, detail="Space not found")
    except InvalidBookingRange as exc:
        raise HTTPException(status_code=422, detail=exc.reason_code)
    except BookingConflictError as exc:
        raise HTTPException(
            status_code=409,
            detail={
                "code": "dates_unavailable",
                "message": "Space is not available for the selected dates",
                "conflicting_booking_id": exc.conflicting_booking_id,
            },
        )

    return {
        "id": created.id,
        "status": created.status,
        "total_amount": float(created.total_amount),
        "needs_approval": created.needs_approval,
        "sensitive_content": created.sensitive_content,
    }
