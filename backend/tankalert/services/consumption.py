"""
Rolling consumption rate over a trailing window of dip readings.

Negative rates mean the level is falling (consumption), positive rates mean
net refill. A missing rate (None) means there was not enough data and is
never the same thing as a zero rate.
"""
from datetime import datetime
from typing import Iterable, List, Optional
import logging
import numpy as np

from tankalert.schemas.analytics import ReadingPoint, ConsumptionEstimate, Confidence
from tankalert.services.calibration import SECONDS_PER_DAY, round_half_up, window_start
from tankalert.services.field_mapping import parse_timestamp

logger = logging.getLogger(__name__)

# Spacing accepted for the previous-day change, in days
PREV_DAY_MIN_GAP = 0.3
PREV_DAY_MAX_GAP = 3.0


def sort_readings(readings: Iterable[ReadingPoint]) -> List[ReadingPoint]:
    # sorted() is stable, so equal timestamps keep insertion order
    return sorted(readings, key=lambda r: r.timestamp)


def readings_in_window(readings: Iterable[ReadingPoint], as_of: datetime, window_days: int) -> List[ReadingPoint]:
    start = window_start(as_of, window_days)
    return sort_readings(r for r in readings if start <= r.timestamp <= as_of)


def rate_per_day(readings: List[ReadingPoint]) -> Optional[float]:
    """
    Net level change per day across consecutive pairs of sorted readings.
    Pairs with zero or negative spacing are skipped.
    """
    if len(readings) < 2:
        return None

    total_delta = 0.0
    total_days = 0.0
    for prev, curr in zip(readings, readings[1:]):
        days = (curr.timestamp - prev.timestamp).total_seconds() / SECONDS_PER_DAY
        if days <= 0:
            continue
        total_delta += curr.value - prev.value
        total_days += days

    if total_days <= 0:
        return None
    return round_half_up(total_delta / total_days)


def fit_quality(readings: List[ReadingPoint]) -> float:
    """R squared of a least-squares line through (days, value)."""
    if len(readings) < 3:
        return 0.0
    first = readings[0].timestamp
    x = np.array([(r.timestamp - first).total_seconds() / SECONDS_PER_DAY for r in readings])
    y = np.array([r.value for r in readings])
    if np.ptp(x) == 0:
        return 0.0
    if np.ptp(y) == 0:
        # Perfectly flat series fits a horizontal line exactly
        return 1.0
    r = np.corrcoef(x, y)[0, 1]
    return float(r * r)


def grade_confidence(data_points: int, r2: float, window_days: int) -> Confidence:
    if data_points >= 7 and r2 > 0.7 and window_days >= 7:
        return Confidence.HIGH
    if data_points >= 5 and r2 > 0.5:
        return Confidence.MEDIUM
    return Confidence.LOW


def estimate_consumption(
    readings: Iterable[ReadingPoint],
    as_of: datetime,
    window_days: int = 7,
    tank_id: Optional[int] = None,
) -> ConsumptionEstimate:
    as_of = parse_timestamp(as_of)
    window = readings_in_window(readings, as_of, window_days)
    rate = rate_per_day(window)
    confidence = grade_confidence(len(window), fit_quality(window), window_days) if rate is not None else Confidence.LOW

    return ConsumptionEstimate(
        tank_id=tank_id,
        as_of=as_of,
        window_days=window_days,
        rate_per_day=rate,
        data_points=len(window),
        confidence=confidence,
    )


def previous_day_change(readings: Iterable[ReadingPoint]) -> Optional[float]:
    """
    Signed change between the most recent pair of readings spaced roughly a day apart.
    Walks back from the newest reading; returns None if no pair qualifies.
    """
    ordered = sort_readings(readings)
    for i in range(len(ordered) - 1, 0, -1):
        curr = ordered[i]
        for j in range(i - 1, -1, -1):
            prev = ordered[j]
            days = (curr.timestamp - prev.timestamp).total_seconds() / SECONDS_PER_DAY
            if days < PREV_DAY_MIN_GAP:
                continue
            if days > PREV_DAY_MAX_GAP:
                break
            return curr.value - prev.value
    return None
