"""
Tests for the per-tank evaluation pipeline.

Covers the end-to-end scenarios, the missing-data and calibration
properties, idempotence and per-tank isolation in fleet evaluation.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from tankalert.schemas.analytics import (
    ReadingPoint, StatusBand, StatusThresholds, TankCalibration, TankSnapshot,
)
from tankalert.services import fill_status
from tankalert.services.calibration import MISSING_SAFE_LEVEL, SAFE_LEVEL_NOT_ABOVE_MIN
from tankalert.services.fill_status import consumption_for, evaluate_fleet, evaluate_tank


class TestScenarios:
    """End-to-end scenarios"""

    def test_large_tank_percent(self, make_snapshot, as_of):
        snapshot = make_snapshot([(3, 210000), (0, 200000)], safe_level=330000)
        status = evaluate_tank(snapshot, as_of)
        assert status.percent_full == 60.6
        assert status.current_level == 200000

    def test_small_tank_percent_is_critical(self, make_snapshot, as_of):
        snapshot = make_snapshot([(1, 15000), (0, 14800)], safe_level=110000)
        status = evaluate_tank(snapshot, as_of)
        assert status.percent_full == 13.5
        assert status.status == StatusBand.CRITICAL

    def test_seven_day_forecast(self, make_snapshot, as_of):
        snapshot = make_snapshot([(7, 50000), (0, 36000)], safe_level=100000)
        status = evaluate_tank(snapshot, as_of)
        assert status.rate_per_day == -2000
        assert status.days_to_min == 18.0
        assert status.percent_full == 36.0
        assert status.status == StatusBand.NORMAL

    def test_no_readings_in_window_is_unknown(self, make_snapshot, as_of):
        snapshot = make_snapshot([(20, 50000)], safe_level=100000)
        status = evaluate_tank(snapshot, as_of)
        assert status.status == StatusBand.UNKNOWN
        assert status.percent_full is None
        assert status.current_level == 50000

    def test_no_readings_at_all_is_unknown(self, make_snapshot, as_of):
        status = evaluate_tank(make_snapshot([]), as_of)
        assert status.status == StatusBand.UNKNOWN
        assert status.percent_full is None
        assert status.current_level is None
        assert status.rate_per_day is None
        assert status.days_to_min is None

    @pytest.mark.parametrize("level,expected", [
        (10000, StatusBand.CRITICAL),
        (25000, StatusBand.LOW),
        (50000, StatusBand.NORMAL),
    ])
    def test_bands_from_level(self, make_snapshot, as_of, level, expected):
        # Slow consumption keeps days_to_min well above the critical window
        snapshot = make_snapshot([(1, level + 100), (0, level)], safe_level=100000)
        assert evaluate_tank(snapshot, as_of).status == expected


class TestMissingData:
    """Zero or one in-window reading never classifies"""

    def test_one_reading_in_window(self, make_snapshot, as_of):
        status = evaluate_tank(make_snapshot([(1, 10000)]), as_of)
        assert status.rate_per_day is None
        assert status.days_to_min is None
        assert status.status == StatusBand.UNKNOWN

    def test_one_reading_in_window_with_older_history(self, make_snapshot, as_of):
        status = evaluate_tank(make_snapshot([(30, 90000), (1, 10000)]), as_of)
        assert status.rate_per_day is None
        assert status.status == StatusBand.UNKNOWN

    def test_refilling_tank_has_no_forecast(self, make_snapshot, as_of):
        status = evaluate_tank(make_snapshot([(2, 20000), (1, 80000)]), as_of)
        assert status.rate_per_day > 0
        assert status.days_to_min is None
        assert status.prev_day_used == 60000
        assert status.status == StatusBand.NORMAL


class TestCalibration:
    """Invalid calibration yields no percentage and an unknown status"""

    @pytest.mark.parametrize("safe,minimum,issue", [
        (None, 0, MISSING_SAFE_LEVEL),
        (5000, 5000, SAFE_LEVEL_NOT_ABOVE_MIN),
        (4000, 5000, SAFE_LEVEL_NOT_ABOVE_MIN),
    ])
    def test_invalid_calibration(self, make_snapshot, as_of, safe, minimum, issue):
        snapshot = make_snapshot([(2, 3000), (0, 2000)], safe_level=safe, min_level=minimum)
        status = evaluate_tank(snapshot, as_of)
        assert status.percent_full is None
        assert status.status == StatusBand.UNKNOWN
        assert status.calibration_issue == issue
        assert status.usable_capacity is None
        assert status.ullage is None

    def test_invalid_calibration_is_logged(self, make_snapshot, as_of, caplog):
        snapshot = make_snapshot([(2, 3000), (0, 2000)], safe_level=None)
        with caplog.at_level("WARNING"):
            evaluate_tank(snapshot, as_of)
        assert "invalid calibration" in caplog.text

    def test_below_min_level_is_critical_with_negative_days(self, make_snapshot, as_of):
        snapshot = make_snapshot([(2, 1500), (0, 500)], safe_level=10000, min_level=1000)
        status = evaluate_tank(snapshot, as_of)
        assert status.percent_full == 0.0
        assert status.days_to_min == -1.0
        assert status.status == StatusBand.CRITICAL


class TestPipelineProperties:
    """Idempotence, configuration and capacity fields"""

    def test_idempotent(self, make_snapshot, as_of):
        snapshot = make_snapshot([(6, 80000), (3, 70000), (0, 62000)])
        assert evaluate_tank(snapshot, as_of) == evaluate_tank(snapshot, as_of)

    def test_snapshot_is_immutable(self, make_snapshot):
        snapshot = make_snapshot([(1, 100)])
        with pytest.raises(Exception):
            snapshot.readings = ()

    def test_thresholds_are_configurable(self, make_snapshot, as_of):
        snapshot = make_snapshot([(1, 40100), (0, 40000)])
        assert evaluate_tank(snapshot, as_of).status == StatusBand.NORMAL
        strict = StatusThresholds(low_percent=50)
        assert evaluate_tank(snapshot, as_of, strict).status == StatusBand.LOW

    def test_capacity_fields(self, make_snapshot, as_of):
        snapshot = make_snapshot([(1, 4100), (0, 4000)], safe_level=11000, min_level=1000)
        status = evaluate_tank(snapshot, as_of)
        assert status.usable_capacity == 10000
        assert status.ullage == 7000
        assert status.last_reading_by == "dipper"
        assert status.last_reading_at == as_of

    def test_consumption_for(self, make_snapshot, as_of):
        estimate = consumption_for(make_snapshot([(7, 50000), (0, 36000)], tank_id=9), as_of)
        assert estimate.tank_id == 9
        assert estimate.rate_per_day == -2000


class TestEvaluateFleet:
    """Fleet evaluation isolates failures per tank"""

    def test_evaluates_each_tank(self, make_snapshot, as_of):
        snapshots = [
            make_snapshot([(1, 10100), (0, 10000)], tank_id=1),
            make_snapshot([], tank_id=2),
            make_snapshot([(1, 60100), (0, 60000)], tank_id=3, safe_level=None),
        ]
        results = evaluate_fleet(snapshots, as_of)
        assert [r.tank_id for r in results] == [1, 2, 3]
        assert [r.status for r in results] == [StatusBand.CRITICAL, StatusBand.UNKNOWN, StatusBand.UNKNOWN]

    def test_failure_on_one_tank_does_not_abort_others(self, make_snapshot, as_of):
        real = fill_status.estimate_consumption

        def flaky(readings, as_of, window_days, tank_id=None):
            if tank_id == 2:
                raise RuntimeError("corrupt reading")
            return real(readings, as_of, window_days, tank_id=tank_id)

        snapshots = [
            make_snapshot([(1, 50100), (0, 50000)], tank_id=1),
            make_snapshot([(1, 50100), (0, 50000)], tank_id=2),
            make_snapshot([(1, 20100), (0, 20000)], tank_id=3),
        ]
        with patch.object(fill_status, "estimate_consumption", side_effect=flaky):
            results = evaluate_fleet(snapshots, as_of)

        assert results[0].status == StatusBand.NORMAL
        assert results[1].status == StatusBand.UNKNOWN
        assert results[1].error == "corrupt reading"
        assert results[2].status == StatusBand.LOW


class TestTimezoneAwareInput:
    """Aware timestamps are normalized to naive UTC before evaluation"""

    def test_aware_readings_with_default_as_of(self):
        now = datetime.now(timezone.utc)
        snapshot = TankSnapshot(
            calibration=TankCalibration(tank_id=1, safe_level=100000.0),
            readings=(
                ReadingPoint(timestamp=now - timedelta(days=2), value=52000),
                ReadingPoint(timestamp=now - timedelta(hours=1), value=50000),
            ),
        )
        status = evaluate_tank(snapshot)
        assert status.percent_full == 50.0
        assert status.rate_per_day is not None
        assert status.status == StatusBand.NORMAL
        assert status.last_reading_at.tzinfo is None

    def test_aware_as_of_with_naive_readings(self, make_snapshot, as_of):
        snapshot = make_snapshot([(1, 50100), (0, 50000)])
        aware = as_of.replace(tzinfo=timezone.utc)
        assert evaluate_tank(snapshot, aware) == evaluate_tank(snapshot, as_of)
        assert consumption_for(snapshot, aware).rate_per_day == -100.0

    def test_offset_converted_to_utc(self):
        perth = timezone(timedelta(hours=8))
        point = ReadingPoint(timestamp=datetime(2026, 10, 19, 14, 0, tzinfo=perth), value=1)
        assert point.timestamp == datetime(2026, 10, 19, 6, 0)
