"""Booking creation - the authoritative side of availability.

The dialog's conflict check runs on a snapshot taken when it opened, so a
range it accepted may be taken by the time the advertiser submits. Creation
locks the space row, re-checks the range against current bookings and
recomputes price and approval flags from the stored space. Client-supplied
amounts and flags are advisory only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from elaview.domain.booking_conflict import assert_no_booking_conflict
from elaview.domain.compliance import ComplianceResult, check_compliance
from elaview.domain.pricing import total_amount as compute_total
from elaview.domain.range_selection import SelectionState
from elaview.infra.db import txn
from elaview.infra.repositories.bookings_repository import insert_booking
from elaview.infra.repositories.spaces_repository import get_space
from elaview.infra.time import today as current_day
from elaview.observability.logging import get_logger
from elaview.observability.redaction import safe_log_context

logger = get_logger(__name__)


class SpaceNotFound(Exception):
    def __init__(self, space_id: str) -> None:
        self.space_id = space_id
        super().__init__(f"Space not found: {space_id}")


class InvalidBookingRange(Exception):
    def __init__(self, reason_code: str) -> None:
        self.reason_code = reason_code
        super().__init__(f"Invalid booking range: {reason_code}")


@dataclass(frozen=True)
class CreatedBooking:
    id: str
    status: str
    total_amount: Decimal
    needs_approval: bool
    sensitive_content: bool


def validate_range(start_date: date, end_date: date, *, today: date) -> None:
    if start_date > end_date:
        raise InvalidBookingRange("end_before_start")
    if start_date < today:
        raise InvalidBookingRange("start_in_past")


def create_booking(
    *,
    space_id: str,
    start_date: date,
    end_date: date,
    campaign_name: str,
    brand_name: str,
    content_type: list[str],
    content_description: str = "",
    message: str = "",
    client_total: Decimal | None = None,
    today: date | None = None,
) -> CreatedBooking:
    """Create a pending booking after re-validating availability.

    Raises:
        InvalidBookingRange: Reversed range or start in the past.
        SpaceNotFound: Unknown space.
        BookingConflictError: The range overlaps a confirmed/active booking.
    """
    validate_range(start_date, end_date, today=today or current_day())

    booking_id, amount, compliance = _create_in_txn(
        space_id=space_id,
        start_date=start_date,
        end_date=end_date,
        campaign_name=campaign_name,
        brand_name=brand_name,
        content_type=content_type,
        content_description=content_description,
        message=message,
        client_total=client_total,
    )

    logger.info(
        "booking created",
        extra={
            "extra_fields": {
                "booking_id": booking_id,
                "space_id": space_id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "needs_approval": compliance.needs_approval,
                **safe_log_context(campaign_name=campaign_name),
            }
        },
    )
    return CreatedBooking(
        id=booking_id,
        status="pending",
        total_amount=amount,
        needs_approval=compliance.needs_approval,
        sensitive_content=compliance.sensitive_content,
    )


def _create_in_txn(
    *,
    space_id: str,
    start_date: date,
    end_date: date,
    campaign_name: str,
    brand_name: str,
    content_type: list[str],
    content_description: str,
    message: str,
    client_total: Decimal | None,
) -> tuple[str, Decimal, ComplianceResult]:
    with txn() as cur:
        space = get_space(cur, space_id, lock=True)
        if space is None:
            raise SpaceNotFound(space_id)

        assert_no_booking_conflict(
            cur, space_id=space_id, start_date=start_date, end_date=end_date
        )

        amount = compute_total(
            SelectionState(start=start_date, end=end_date), space.daily_rate
        )
        if client_total is not None and Decimal(str(client_total)) != amount:
            logger.warning(
                "client total differs from server total",
                extra={
                    "extra_fields": {
                        "space_id": space_id,
                        "client_total": str(client_total),
                        "server_total": str(amount),
                    }
                },
            )

        compliance = check_compliance(content_type, space.prohibited_content)

        booking_id = insert_booking(
            cur,
            space_id=space_id,
            start_date=start_date,
            end_date=end_date,
            total_amount=amount,
            campaign_name=campaign_name,
            brand_name=brand_name,
            content_type=list(content_type),
            content_description=content_description,
            message=message,
            needs_approval=compliance.needs_approval,
            sensitive_content=compliance.sensitive_content,
        )
    return booking_id, amount, compliance
