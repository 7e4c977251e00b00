"""Bookings repository - persistence for booking records.

Uses raw SQL with psycopg2 (no ORM).
"""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from typing import Sequence

from psycopg2.extensions import cursor as PgCursor

from elaview.domain.models import Booking


def list_bookings(
    cur: PgCursor,
    *,
    space_id: str,
    statuses: Sequence[str],
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Booking]:
    """List bookings of a space in the given statuses, ordered by start.

    When a window is given only bookings overlapping it are returned.
    """
    conditions = ["space_id = %s", "status = ANY(%s::booking_status[])"]
    params: list = [space_id, list(statuses)]

    if end_date is not None:
        conditions.append("start_date <= %s")
        params.append(end_date)
    if start_date is not None:
        conditions.append("end_date >= %s")
        params.append(start_date)

    cur.execute(
        f"""
        SELECT id, space_id, start_date, end_date, status
        FROM bookings
        WHERE {" AND ".join(conditions)}
        ORDER BY start_date
        """,
        params,
    )
    return [
        Booking(
            id=str(row[0]),
            space_id=str(row[1]),
            start_date=row[2],
            end_date=row[3],
            status=row[4],
        )
        for row in cur.fetchall()
    ]


def insert_booking(
    cur: PgCursor,
    *,
    space_id: str,
    start_date: date,
    end_date: date,
    total_amount: Decimal,
    campaign_name: str,
    brand_name: str,
    content_type: list[str],
    content_description: str,
    message: str,
    needs_approval: bool,
    sensitive_content: bool,
) -> str:
    """Insert a pending booking and return its id."""
    cur.execute(
        """
        INSERT INTO bookings (
            space_id, start_date, end_date, status, total_amount,
            campaign_name, brand_name, content_type, content_description,
            message, needs_approval, sensitive_content
        )
        VALUES (%s, %s, %s, 'pending', %s, %s, %s, %s::jsonb, %s, %s, %s, %s)
        RETURNING id
        """,
        (
            space_id,
            start_date,
            end_date,
            total_amount,
            campaign_name,
            brand_name,
            json.dumps(content_type),
            content_description,
            message,
            needs_approval,
            sensitive_content,
        ),
    )
    row = cur.fetchone()
    return str(row[0])
