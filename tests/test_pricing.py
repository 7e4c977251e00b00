"""Tests for the flat per-day pricing."""

from datetime import date
from decimal import Decimal

import pytest

from elaview.domain.pricing import selected_dates, total_amount
from elaview.domain.range_selection import SelectionState


class TestSelectedDates:
    def test_inclusive_range(self):
        selection = SelectionState(date(2024, 7, 13), date(2024, 7, 15))
        assert selected_dates(selection) == ["2024-07-13", "2024-07-14", "2024-07-15"]

    def test_reversed_endpoints_are_sorted(self):
        selection = SelectionState(date(2024, 7, 15), date(2024, 7, 13))
        assert selected_dates(selection) == ["2024-07-13", "2024-07-14", "2024-07-15"]

    def test_incomplete_is_empty(self):
        assert selected_dates(SelectionState(start=date(2024, 7, 13))) == []
        assert selected_dates(SelectionState()) == []


class TestTotalAmount:
    def test_three_days_at_hundred(self):
        selection = SelectionState(date(2024, 7, 13), date(2024, 7, 15))
        assert total_amount(selection, Decimal("100")) == Decimal("300")

    @pytest.mark.parametrize("days", [1, 2, 7, 31])
    def test_days_times_rate(self, days):
        start = date(2024, 7, 1)
        end = date.fromordinal(start.toordinal() + days - 1)
        assert total_amount(SelectionState(start, end), Decimal("49.99")) == days * Decimal("49.99")

    def test_missing_end_is_zero(self):
        assert total_amount(SelectionState(start=date(2024, 7, 13)), 100) == 0

    @pytest.mark.parametrize("rate", [None, 0, Decimal("0")])
    def test_falsy_rate_is_zero(self, rate):
        selection = SelectionState(date(2024, 7, 13), date(2024, 7, 15))
        assert total_amount(selection, rate) == 0

    def test_float_rate_does_not_drift(self):
        selection = SelectionState(date(2024, 7, 1), date(2024, 7, 3))
        assert total_amount(selection, 0.1) == Decimal("0.3")
