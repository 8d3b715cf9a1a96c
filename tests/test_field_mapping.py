"""
Tests for mapping external record shapes to canonical fields.
"""

from datetime import datetime

import pytest

from tankalert.services.field_mapping import (
    normalize_reading_record,
    normalize_tank_record,
    parse_timestamp,
)


class TestNormalizeTankRecord:
    """Tests for tank record aliases"""

    @pytest.mark.parametrize("capacity_key", ["safe_level", "safe_fill", "capacity", "capacity_liters"])
    def test_capacity_aliases(self, capacity_key):
        record = normalize_tank_record({"location": "Narrogin", capacity_key: "55000"})
        assert record["safe_level"] == 55000.0

    def test_min_level_defaults_to_zero(self):
        record = normalize_tank_record({"location": "Narrogin", "safe_fill": 55000})
        assert record["min_level"] == 0.0

    def test_first_alias_wins(self):
        record = normalize_tank_record({"location": "Narrogin", "safe_level": 10000, "capacity": 99999})
        assert record["safe_level"] == 10000.0

    def test_blank_values_fall_through(self):
        record = normalize_tank_record({"name": "Depot", "safe_level": "  ", "capacity": "1,200"})
        assert record["location"] == "Depot"
        assert record["safe_level"] == 1200.0

    def test_missing_capacity_stays_missing(self):
        assert normalize_tank_record({"location": "Depot"})["safe_level"] is None

    def test_only_canonical_keys(self):
        record = normalize_tank_record({"site": "Depot", "product": "ULP", "min": "500", "unrelated": 1})
        assert "unrelated" not in record
        assert record["product_type"] == "ULP"
        assert record["min_level"] == 500.0

    def test_no_location_rejected(self):
        with pytest.raises(ValueError):
            normalize_tank_record({"safe_level": 100})

    def test_bad_number_rejected(self):
        with pytest.raises(ValueError):
            normalize_tank_record({"location": "Depot", "safe_level": "lots"})

    @pytest.mark.parametrize("value", ["inf", "nan", float("inf")])
    def test_non_finite_number_rejected(self, value):
        with pytest.raises(ValueError):
            normalize_tank_record({"location": "Depot", "safe_level": value})


class TestNormalizeReadingRecord:
    """Tests for reading record aliases"""

    def test_short_gauge_columns(self):
        record = normalize_reading_record({"t": "2026-10-01 06:30:00", "g": "1234.5"})
        assert record == {
            "timestamp": datetime(2026, 10, 1, 6, 30),
            "value": 1234.5,
            "recorded_by": None,
        }

    def test_telemetry_columns(self):
        record = normalize_reading_record({"reading_at": "2026-10-01T06:30:00Z", "level_liters": 900, "source": "agbot"})
        assert record["timestamp"] == datetime(2026, 10, 1, 6, 30)
        assert record["value"] == 900.0
        assert record["recorded_by"] == "agbot"

    def test_missing_value_rejected(self):
        with pytest.raises(KeyError):
            normalize_reading_record({"timestamp": "2026-10-01 06:30:00"})

    def test_bad_timestamp_rejected(self):
        with pytest.raises(ValueError):
            normalize_reading_record({"timestamp": "yesterday", "value": 10})

    @pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-inf"])
    def test_non_finite_value_rejected(self, value):
        with pytest.raises(ValueError):
            normalize_reading_record({"t": "2026-10-01 06:30:00", "g": value})

    def test_negative_value_rejected(self):
        with pytest.raises(ValueError):
            normalize_reading_record({"t": "2026-10-01 06:30:00", "g": "-12"})

    def test_zero_value_allowed(self):
        assert normalize_reading_record({"t": "2026-10-01 06:30:00", "g": "0"})["value"] == 0.0


class TestParseTimestamp:
    """Tests for parse_timestamp"""

    def test_day_first_format(self):
        assert parse_timestamp("03/10/2026 14:00") == datetime(2026, 10, 3, 14, 0)

    def test_offset_converted_to_utc(self):
        assert parse_timestamp("2026-10-01T14:00:00+08:00") == datetime(2026, 10, 1, 6, 0)

    def test_quoted(self):
        assert parse_timestamp('"2026-10-01 06:30:00"') == datetime(2026, 10, 1, 6, 30)
