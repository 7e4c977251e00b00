"""Shared pytest fixtures for Elaview tests."""
import sys
sys.dont_write_bytecode = True

from datetime import date  # noqa: E402

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _default_policy(monkeypatch):
    """Pin the availability policy so tests do not depend on the host env."""
    monkeypatch.setenv("AVAILABILITY_POLICY", "fail_open")


@pytest.fixture
def today() -> date:
    return date(2024, 7, 1)


@pytest.fixture
def july_bookings() -> list[dict]:
    """July calendar of one space: 10th..12th confirmed, others non-blocking."""
    return [
        {"id": "b-1", "start_date": "2024-07-10", "end_date": "2024-07-12", "status": "confirmed"},
        {"id": "b-2", "start_date": "2024-07-20", "end_date": "2024-07-20", "status": "pending"},
        {"id": "b-3", "start_date": "2024-07-25", "end_date": "2024-07-26", "status": "cancelled"},
    ]
