"""Booking-core records.

Persistence owns the full schema; these carry only what availability,
pricing and compliance need.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal

BookingStatus = Literal["pending", "confirmed", "active", "cancelled", "completed"]

BOOKING_STATUSES: tuple[BookingStatus, ...] = (
    "pending",
    "confirmed",
    "active",
    "cancelled",
    "completed",
)

# Only these statuses occupy a space's calendar.
BLOCKING_STATUSES: tuple[BookingStatus, ...] = ("confirmed", "active")


@dataclass(frozen=True)
class Space:
    """Advertising space as seen by a booking session."""

    id: str
    daily_rate: Decimal | None = None
    prohibited_content: tuple[str, ...] = field(default_factory=tuple)
    title: str | None = None


@dataclass(frozen=True)
class Booking:
    """Existing booking of a space. Dates are inclusive calendar days."""

    id: str
    space_id: str
    start_date: date | str
    end_date: date | str
    status: BookingStatus
