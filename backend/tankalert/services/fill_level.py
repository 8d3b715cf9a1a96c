from typing import Iterable, Optional

from tankalert.schemas.analytics import ReadingPoint
from tankalert.services.calibration import calibration_issue, round_half_up


def latest_reading(readings: Iterable[ReadingPoint]) -> Optional[ReadingPoint]:
    """Most recent reading by timestamp. On equal timestamps the later-inserted one wins."""
    latest = None
    for reading in readings:
        if latest is None or reading.timestamp >= latest.timestamp:
            latest = reading
    return latest


def percent_full(current_level: Optional[float], safe_level: Optional[float], min_level: Optional[float] = 0.0) -> Optional[float]:
    """
    Percentage of the usable range (min_level..safe_level) currently filled,
    rounded to one decimal and clamped to [0, 100].

    Returns None, never 0, when there is no level or the calibration is unusable.
    """
    if current_level is None:
        return None
    if calibration_issue(safe_level, min_level):
        return None

    floor = min_level or 0.0
    pct = ((current_level - floor) / (safe_level - floor)) * 100
    return max(0.0, min(100.0, round_half_up(pct, 1)))


def usable_capacity(safe_level: Optional[float], min_level: Optional[float] = 0.0) -> Optional[float]:
    if calibration_issue(safe_level, min_level):
        return None
    return max(0.0, safe_level - (min_level or 0.0))


def ullage(current_level: Optional[float], safe_level: Optional[float], min_level: Optional[float] = 0.0) -> Optional[float]:
    """Volume that can still be delivered before reaching the safe fill level."""
    if current_level is None or calibration_issue(safe_level, min_level):
        return None
    return max(0.0, safe_level - current_level)
