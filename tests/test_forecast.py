"""
Tests for days-to-minimum projection.
"""

from tankalert.services.forecast import days_to_min


class TestDaysToMin:
    """Tests for days_to_min"""

    def test_consuming_tank(self):
        assert days_to_min(36000, 0, -2000) == 18.0

    def test_relative_to_min_level(self):
        assert days_to_min(5000, 1000, -1000) == 4.0

    def test_rounded_to_one_decimal(self):
        assert days_to_min(10000, 0, -3000) == 3.3

    def test_refilling_tank_is_undefined(self):
        assert days_to_min(36000, 0, 500) is None

    def test_flat_rate_is_undefined_not_infinite(self):
        assert days_to_min(36000, 0, 0) is None

    def test_no_rate_is_undefined(self):
        assert days_to_min(36000, 0, None) is None

    def test_no_level_is_undefined(self):
        assert days_to_min(None, 0, -2000) is None

    def test_below_minimum_is_negative(self):
        """Already in deficit: not clamped to zero"""
        assert days_to_min(500, 1000, -250) == -2.0
