"""Availability loading for the calendar booking dialog.

Existing bookings in a blocking status are expanded into a flat set of ISO
``yyyy-MM-dd`` strings. The set is built once per dialog session and never
maintained incrementally.

Load failures follow ``AVAILABILITY_POLICY``:

- ``fail_open`` (default): log and continue with an empty set.
- ``fail_closed``: raise ``AvailabilityUnavailable``; the session keeps the
  calendar disabled until a reload succeeds.
"""

from __future__ import annotations

import os
from datetime import date, timedelta
from typing import Any, Callable, Iterable, Literal, Mapping, Sequence

from elaview.domain.models import BLOCKING_STATUSES, Booking
from elaview.observability.logging import get_logger

logger = get_logger(__name__)

AvailabilityPolicy = Literal["fail_open", "fail_closed"]

# list_bookings(space_id=..., statuses=...) -> bookings
ListBookings = Callable[..., Sequence[Any]]


class AvailabilityUnavailable(Exception):
    """Raised under fail_closed when existing bookings cannot be loaded."""

    def __init__(self, space_id: str, cause: Exception | None = None) -> None:
        self.space_id = space_id
        self.cause = cause
        super().__init__(f"Availability for space {space_id} could not be loaded")


def availability_policy() -> AvailabilityPolicy:
    """Read AVAILABILITY_POLICY from the environment."""
    value = os.environ.get("AVAILABILITY_POLICY", "fail_open").strip().lower()
    if value not in ("fail_open", "fail_closed"):
        raise RuntimeError(f"Invalid AVAILABILITY_POLICY: {value!r}")
    return value  # type: ignore[return-value]


def to_date(value: date | str) -> date:
    """Coerce a date or ISO string (date or datetime prefix) to a date."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def expand_booking(start: date | str, end: date | str) -> list[str]:
    """Return every ISO date in the inclusive interval [start, end]."""
    current = to_date(start)
    last = to_date(end)
    days: list[str] = []
    while current <= last:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


def _field(booking: Booking | Mapping[str, Any], name: str) -> Any:
    if isinstance(booking, Mapping):
        return booking[name]
    return getattr(booking, name)


def build_blocked_dates(
    bookings: Iterable[Booking | Mapping[str, Any]],
) -> frozenset[str]:
    """Expand blocking bookings into a set of ISO date strings.

    Bookings may be ``Booking`` records or mappings with ``start_date``,
    ``end_date`` and ``status`` keys. Non-blocking statuses are skipped.
    """
    blocked: set[str] = set()
    for booking in bookings:
        if _field(booking, "status") not in BLOCKING_STATUSES:
            continue
        blocked.update(
            expand_booking(_field(booking, "start_date"), _field(booking, "end_date"))
        )
    return frozenset(blocked)


def load_blocked_dates(
    list_bookings: ListBookings,
    space_id: str,
    *,
    policy: AvailabilityPolicy | None = None,
) -> frozenset[str]:
    """Fetch blocking bookings for a space and expand them.

    Args:
        list_bookings: Collaborator called as
            ``list_bookings(space_id=..., statuses=BLOCKING_STATUSES)``.
        space_id: Advertising space identifier.
        policy: Failure policy; read from the environment when None.

    Returns:
        Frozen set of blocked ISO dates (empty on failure under fail_open).

    Raises:
        AvailabilityUnavailable: On fetch failure under fail_closed.
    """
    if policy is None:
        policy = availability_policy()

    try:
        bookings = list_bookings(space_id=space_id, statuses=BLOCKING_STATUSES)
    except Exception as exc:
        logger.error(
            "availability load failed",
            exc_info=True,
            extra={"extra_fields": {"space_id": space_id, "policy": policy}},
        )
        if policy == "fail_closed":
            raise AvailabilityUnavailable(space_id, exc) from exc
        return frozenset()

    blocked = build_blocked_dates(bookings)
    logger.info(
        "availability loaded",
        extra={
            "extra_fields": {
                "space_id": space_id,
                "bookings": len(bookings),
                "blocked_dates": len(blocked),
            }
        },
    )
    return blocked


class AvailabilityLoader:
    """Generation counter guarding against stale availability responses.

    Each ``begin()`` hands out a ticket. Only the ticket of the most recent
    load may apply its result; ``cancel()`` (dialog closed) invalidates every
    outstanding ticket.
    """

    def __init__(self, space_id: str) -> None:
        self.space_id = space_id
        self.blocked_dates: frozenset[str] = frozenset()
        self._generation = 0
        self._in_flight: int | None = None

    @property
    def loading(self) -> bool:
        return self._in_flight is not None

    def begin(self) -> int:
        self._generation += 1
        self._in_flight = self._generation
        return self._generation

    def is_current(self, ticket: int) -> bool:
        return self._in_flight == ticket

    def apply(self, ticket: int, dates: Iterable[str]) -> bool:
        """Keep ``dates`` as the current blocked set if ``ticket`` is current.

        Returns False (and keeps the previous set) for a stale ticket.
        """
        if not self._settle(ticket):
            return False
        self.blocked_dates = frozenset(dates)
        return True

    def discard(self, ticket: int) -> bool:
        """Finish a failed load. Returns False if it was stale."""
        return self._settle(ticket)

    def _settle(self, ticket: int) -> bool:
        if not self.is_current(ticket):
            logger.info(
                "discarding stale availability response",
                extra={
                    "extra_fields": {
                        "space_id": self.space_id,
                        "ticket": ticket,
                        "current": self._in_flight,
                    }
                },
            )
            return False
        self._in_flight = None
        return True

    def cancel(self) -> None:
        self._generation += 1
        self._in_flight = None
