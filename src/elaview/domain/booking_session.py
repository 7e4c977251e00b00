"""Calendar booking dialog session.

One ``BookingSession`` lives for one open dialog. It wires the availability
loader, range selector, pricing and compliance checks into the three dialog
steps (1: dates, 2: campaign details, 3: submitted) and produces the booking
payload handed to the ``submit`` collaborator.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Callable

from elaview.domain.availability import (
    AvailabilityLoader,
    AvailabilityPolicy,
    AvailabilityUnavailable,
    ListBookings,
    availability_policy,
    load_blocked_dates,
)
from elaview.domain.booking_conflict import BookingConflictError
from elaview.domain.calendar import CalendarDay, month_grid, shift_month
from elaview.domain.compliance import ComplianceResult, check_compliance
from elaview.domain.models import Space
from elaview.domain.pricing import selected_dates, total_amount
from elaview.domain.range_selection import CONFLICT_MESSAGE, RangeSelector
from elaview.infra.time import today as current_day
from elaview.observability.logging import get_logger
from elaview.observability.redaction import safe_log_context

logger = get_logger(__name__)

UNAVAILABLE_MESSAGE = (
    "Availability for this space could not be loaded. Please try again."
)

SubmitBooking = Callable[[dict[str, Any]], Any]
ConfirmWarning = Callable[[str], bool]


@dataclass
class BookingDetails:
    campaign_name: str = ""
    brand_name: str = ""
    content_type: list[str] = field(default_factory=list)
    content_description: str = ""
    message: str = ""


class BookingSession:
    """State of one calendar booking dialog."""

    def __init__(
        self,
        space: Space,
        *,
        list_bookings: ListBookings,
        submit: SubmitBooking,
        today: date | None = None,
        policy: AvailabilityPolicy | None = None,
    ) -> None:
        self.space = space
        self.list_bookings = list_bookings
        self.submit = submit
        self.today = today or current_day()
        self.policy = policy or availability_policy()

        self.loader = AvailabilityLoader(space.id)
        self.selector = RangeSelector(frozenset(), today=self.today)
        self.details = BookingDetails()
        self.form_errors: dict[str, str] = {}
        self.availability_error: str | None = None
        self.month = self.today.replace(day=1)
        self.step = 1

    # ── availability ──────────────────────────────────────────────────

    @property
    def blocked_dates(self) -> frozenset[str]:
        return self.selector.blocked_dates

    @property
    def loading(self) -> bool:
        return self.loader.loading

    @property
    def calendar_locked(self) -> bool:
        """True while days must not be clicked."""
        return self.loading or self.availability_error is not None

    def open(self) -> int:
        """Start an availability load; days stay disabled until it settles."""
        return self.loader.begin()

    def finish_load(self, ticket: int, blocked_dates: frozenset[str]) -> bool:
        """Apply a load result. Stale tickets are ignored (returns False)."""
        if not self.loader.apply(ticket, blocked_dates):
            return False
        self.selector.replace_blocked_dates(self.loader.blocked_dates)
        self.availability_error = None
        return True

    def fail_load(self, ticket: int, exc: BaseException) -> bool:
        if not self.loader.discard(ticket):
            return False
        logger.warning(
            "calendar locked after availability failure",
            extra={
                "extra_fields": {
                    "space_id": self.space.id,
                    "error": type(exc).__name__,
                }
            },
        )
        self.availability_error = UNAVAILABLE_MESSAGE
        return True

    def load(self) -> None:
        """Fetch existing bookings and apply the blocked dates."""
        ticket = self.open()
        try:
            blocked = load_blocked_dates(
                self.list_bookings, self.space.id, policy=self.policy
            )
        except AvailabilityUnavailable as exc:
            self.fail_load(ticket, exc)
            return
        self.finish_load(ticket, blocked)

    # ── step 1: dates ─────────────────────────────────────────────────

    @property
    def selection(self):
        return self.selector.selection

    @property
    def conflict_error(self) -> str | None:
        return self.selector.conflict_error

    def select_date(self, day: date) -> bool:
        if self.calendar_locked:
            return False
        return self.selector.select(day)

    def hover_date(self, day: date | None) -> None:
        self.selector.hover(day)

    def month_view(self) -> list[list[CalendarDay]]:
        return month_grid(
            self.month,
            self.selector.selection,
            self.selector.blocked_dates,
            today=self.today,
            hover=self.selector.hover_date,
            loading=self.calendar_locked,
        )

    def next_month(self) -> None:
        self.month = shift_month(self.month, 1)

    def previous_month(self) -> None:
        self.month = shift_month(self.month, -1)

    def selected_dates(self) -> list[str]:
        return selected_dates(self.selector.selection)

    def total_amount(self):
        return total_amount(self.selector.selection, self.space.daily_rate)

    def continue_to_details(self) -> bool:
        if self.step != 1 or not self.selector.require_complete():
            return False
        self.step = 2
        return True

    def back(self) -> None:
        if self.step == 2:
            self.step = 1

    # ── step 2: details ───────────────────────────────────────────────

    def set_details(self, **fields: Any) -> None:
        for name, value in fields.items():
            if not hasattr(self.details, name):
                raise AttributeError(f"Unknown booking detail: {name}")
            setattr(self.details, name, value)

    def toggle_content_type(self, tag: str, checked: bool) -> None:
        tags = [t for t in self.details.content_type if t != tag]
        if checked:
            tags.append(tag)
        self.details.content_type = tags

    @property
    def compliance(self) -> ComplianceResult:
        return check_compliance(
            self.details.content_type, self.space.prohibited_content
        )

    def validate_details(self) -> bool:
        errors: dict[str, str] = {}
        if not self.details.campaign_name.strip():
            errors["campaign_name"] = "Campaign name is required."
        if not self.details.brand_name.strip():
            errors["brand_name"] = "Brand name is required."
        self.form_errors = errors
        return not errors

    def build_payload(self) -> dict[str, Any]:
        days = self.selected_dates()
        compliance = self.compliance
        payload = asdict(self.details)
        payload.update(
            start_date=days[0],
            end_date=days[-1],
            selected_dates=days,
            total_amount=self.total_amount(),
            message=self.details.message or "",
            needs_approval=compliance.needs_approval,
            sensitive_content=compliance.sensitive_content,
        )
        return payload

    def confirm(self, confirm_warning: ConfirmWarning | None = None) -> dict[str, Any] | None:
        """Validate, gate on compliance and hand the payload to ``submit``.

        Only reachable from the details step. Returns the submitted payload,
        or None when the dialog is on another step, validation failed, the
        advertiser declined the content warning, or the server rejected the
        dates as no longer available.
        """
        if self.step != 2:
            return None
        if not self.selector.can_continue or not self.validate_details():
            return None

        compliance = self.compliance
        if compliance.requires_confirmation:
            if confirm_warning is None or not confirm_warning(compliance.warning_message()):
                logger.info(
                    "content warning declined",
                    extra={
                        "extra_fields": {
                            "space_id": self.space.id,
                            "conflicts": list(compliance.conflicts),
                        }
                    },
                )
                return None

        payload = self.build_payload()
        try:
            self.submit(payload)
        except BookingConflictError as exc:
            logger.warning(
                "booking rejected at submission",
                extra={
                    "extra_fields": {
                        "space_id": self.space.id,
                        "conflicting_booking_id": exc.conflicting_booking_id,
                    }
                },
            )
            self.step = 1
            self.load()
            self.selector.reset()
            self.selector.conflict_error = CONFLICT_MESSAGE
            return None

        logger.info(
            "booking submitted",
            extra={
                "extra_fields": {
                    "space_id": self.space.id,
                    "start_date": payload["start_date"],
                    "end_date": payload["end_date"],
                    "days": len(payload["selected_dates"]),
                    "needs_approval": payload["needs_approval"],
                    **safe_log_context(message=payload["message"]),
                }
            },
        )
        self.step = 3
        return payload

    # ── lifecycle ─────────────────────────────────────────────────────

    def close(self) -> None:
        """Discard everything; late availability responses are ignored."""
        self.loader.cancel()
        self.selector.reset()
        self.details = BookingDetails()
        self.form_errors = {}
        self.availability_error = None
        self.step = 1
