"""Tests for shared utility functions."""

from datetime import date, datetime, time

from studio_booking.utils import (
    day_bounds,
    is_valid_email,
    normalize_phone,
    split_hours,
    window_for,
)


class TestNormalizePhone:
    def test_strips_spaces(self):
        assert normalize_phone("0412 345 678") == "0412345678"

    def test_strips_dashes(self):
        assert normalize_phone("0412-345-678") == "0412345678"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+61 412 345 678") == "+61412345678"

    def test_mixed_separators(self):
        assert normalize_phone("+61 (412) 345-678") == "+61412345678"


class TestEmail:
    def test_valid(self):
        assert is_valid_email("ava.thompson@email.com")

    def test_missing_domain_dot(self):
        assert not is_valid_email("ava@localhost")

    def test_two_at_signs(self):
        assert not is_valid_email("ava@@email.com")


class TestTimeHelpers:
    def test_day_bounds_half_open(self):
        start, end = day_bounds(date(2026, 3, 1))
        assert start == datetime(2026, 3, 1, 0, 0)
        assert end == datetime(2026, 3, 2, 0, 0)

    def test_window_for_fractional_duration(self):
        start, end = window_for(date(2026, 3, 1), time(10, 0), 1.5)
        assert start == datetime(2026, 3, 1, 10, 0)
        assert end == datetime(2026, 3, 1, 11, 30)

    def test_window_may_cross_midnight(self):
        _, end = window_for(date(2026, 3, 1), time(22, 0), 3)
        assert end == datetime(2026, 3, 2, 1, 0)

    def test_split_hours(self):
        assert split_hours(2.5) == (2, 30)
        assert split_hours(3.0) == (3, 0)
        assert split_hours(0.75) == (0, 45)
