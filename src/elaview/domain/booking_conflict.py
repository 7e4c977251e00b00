"""Authoritative booking conflict detection for a space.

Dates are inclusive on both ends, so two bookings conflict when

    existing.start_date <= new.end_date AND existing.end_date >= new.start_date

Back-to-back bookings (one ends the 12th, the next starts the 13th) do not
conflict; sharing any single day does. Only blocking statuses count.

The dialog's check runs against a snapshot; this check runs inside the
creating transaction with the space row locked. New bookings are inserted as
``pending`` and so fall outside the ``bookings_no_overlap`` exclusion
constraint, which only guards rows already in a blocking status.
"""

from __future__ import annotations

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from elaview.domain.models import BLOCKING_STATUSES
from elaview.observability.logging import get_logger

logger = get_logger(__name__)


class BookingConflictError(Exception):
    """Raised when a space already has a blocking booking in the range."""

    def __init__(
        self,
        space_id: str,
        conflicting_booking_id: str,
        existing_start: date | None = None,
        existing_end: date | None = None,
    ) -> None:
        self.space_id = space_id
        self.conflicting_booking_id = conflicting_booking_id
        self.existing_start = existing_start
        self.existing_end = existing_end
        super().__init__(
            f"Space {space_id} is already booked "
            f"({existing_start} to {existing_end})"
        )


def find_booking_conflict(
    cur: PgCursor,
    *,
    space_id: str,
    start_date: date,
    end_date: date,
    exclude_booking_id: str | None = None,
    lock: bool = False,
) -> tuple[str, date, date] | None:
    """Return ``(booking_id, start_date, end_date)`` of the first overlap.

    Args:
        cur: Database cursor (within a transaction).
        space_id: Advertising space identifier.
        start_date: First booked day (inclusive).
        end_date: Last booked day (inclusive).
        exclude_booking_id: Booking to ignore (date edits).
        lock: Append FOR UPDATE to lock the conflicting row.
    """
    conditions = [
        "space_id = %s",
        "status = ANY(%s::booking_status[])",
        "start_date <= %s",  # existing start <= new end
        "end_date >= %s",  # existing end >= new start
    ]
    params: list = [space_id, list(BLOCKING_STATUSES), end_date, start_date]

    if exclude_booking_id is not None:
        conditions.append("id != %s")
        params.append(exclude_booking_id)

    where = " AND ".join(conditions)
    suffix = " FOR UPDATE" if lock else ""

    cur.execute(
        f"""
        SELECT id, start_date, end_date
        FROM bookings
        WHERE {where}
        ORDER BY start_date
        LIMIT 1
        {suffix}
        """,
        params,
    )
    row = cur.fetchone()
    if row is None:
        return None

    conflict = (str(row[0]), row[1], row[2])
    logger.warning(
        "booking conflict detected",
        extra={
            "extra_fields": {
                "space_id": space_id,
                "requested_start": start_date.isoformat(),
                "requested_end": end_date.isoformat(),
                "conflicting_booking_id": conflict[0],
                "existing_start": str(conflict[1]),
                "existing_end": str(conflict[2]),
            }
        },
    )
    return conflict


def check_booking_conflict(cur: PgCursor, **kwargs) -> str | None:
    """Return the first conflicting booking ID, or None.

    Keyword arguments are forwarded to ``find_booking_conflict``.
    """
    conflict = find_booking_conflict(cur, **kwargs)
    return conflict[0] if conflict else None


def assert_no_booking_conflict(
    cur: PgCursor,
    *,
    space_id: str,
    start_date: date,
    end_date: date,
    exclude_booking_id: str | None = None,
    lock: bool = False,
) -> None:
    """Raise BookingConflictError if the range overlaps a blocking booking."""
    conflict = find_booking_conflict(
        cur,
        space_id=space_id,
        start_date=start_date,
        end_date=end_date,
        exclude_booking_id=exclude_booking_id,
        lock=lock,
    )
    if conflict is not None:
        booking_id, existing_start, existing_end = conflict
        raise BookingConflictError(
            space_id=space_id,
            conflicting_booking_id=booking_id,
            existing_start=existing_start,
            existing_end=existing_end,
        )
