"""Tests for POST /bookings."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from elaview.api.factory import create_app
from elaview.domain.booking_conflict import BookingConflictError
from elaview.domain.bookings import CreatedBooking, InvalidBookingRange, SpaceNotFound

PAYLOAD = {
    "space_id": "space-1",
    "campaign_name": "Summer Launch",
    "brand_name": "Acme",
    "content_type": ["alcohol"],
    "content_description": "Beach party",
    "message": "Looking forward to it",
    "start_date": "2024-07-13",
    "end_date": "2024-07-15",
    "selected_dates": ["2024-07-13", "2024-07-14", "2024-07-15"],
    "total_amount": 300,
    "needs_approval": True,
    "sensitive_content": True,
}

CREATED = CreatedBooking(
    id="bk-new",
    status="pending",
    total_amount=Decimal("300"),
    needs_approval=True,
    sensitive_content=True,
)


@pytest.fixture
def client():
    return TestClient(create_app())


class TestCreateBookingEndpoint:
    def test_created(self, client):
        with patch("elaview.api.routes.bookings.create_booking", return_value=CREATED) as mock:
            response = client.post("/bookings", json=PAYLOAD)

        assert response.status_code == 201
        assert response.json() == {
            "id": "bk-new",
            "status": "pending",
            "total_amount": 300,
            "needs_approval": True,
            "sensitive_content": True,
        }
        kwargs = mock.call_args.kwargs
        assert kwargs["space_id"] == "space-1"
        assert kwargs["client_total"] == Decimal("300")
        assert str(kwargs["start_date"]) == "2024-07-13"

    def test_conflict_returns_409(self, client):
        error = BookingConflictError("space-1", "bk-1")
        with patch("elaview.api.routes.bookings.create_booking", side_effect=error):
            response = client.post("/bookings", json=PAYLOAD)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "dates_unavailable"
        assert detail["conflicting_booking_id"] == "bk-1"

    def test_unknown_space(self, client):
        with patch("elaview.api.routes.bookings.create_booking", side_effect=SpaceNotFound("space-1")):
            response = client.post("/bookings", json=PAYLOAD)

        assert response.status_code == 404

    def test_invalid_range(self, client):
        error = InvalidBookingRange("start_in_past")
        with patch("elaview.api.routes.bookings.create_booking", side_effect=error):
            response = client.post("/bookings", json=PAYLOAD)

        assert response.status_code == 422
        assert response.json()["detail"] == "start_in_past"

    def test_blank_names_rejected(self, client):
        with patch("elaview.api.routes.bookings.create_booking") as mock:
            response = client.post("/bookings", json={**PAYLOAD, "brand_name": "   "})

        assert response.status_code == 422
        mock.assert_not_called()

    def test_selected_dates_must_cover_range(self, client):
        body = {**PAYLOAD, "selected_dates": ["2024-07-13", "2024-07-15"]}
        with patch("elaview.api.routes.bookings.create_booking") as mock:
            response = client.post("/bookings", json=body)

        assert response.status_code == 422
        assert response.json()["detail"] == "selected_dates_mismatch"
        mock.assert_not_called()

    def test_selected_dates_outside_range_rejected(self, client):
        body = {
            **PAYLOAD,
            "selected_dates": ["2024-07-13", "2024-07-14", "2024-07-15", "2024-07-16"],
        }
        with patch("elaview.api.routes.bookings.create_booking") as mock:
            response = client.post("/bookings", json=body)

        assert response.status_code == 422
        mock.assert_not_called()

    def test_selected_dates_optional(self, client):
        body = {k: v for k, v in PAYLOAD.items() if k != "selected_dates"}
        with patch("elaview.api.routes.bookings.create_booking", return_value=CREATED):
            response = client.post("/bookings", json=body)

        assert response.status_code == 201

    def test_missing_dates_rejected(self, client):
        body = {k: v for k, v in PAYLOAD.items() if k != "end_date"}
        response = client.post("/bookings", json=body)

        assert response.status_code == 422
