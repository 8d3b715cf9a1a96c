from typing import Optional

from tankalert.schemas.analytics import StatusBand, StatusThresholds

DEFAULT_THRESHOLDS = StatusThresholds()


def classify_status(
    percent_full: Optional[float],
    days_to_min: Optional[float],
    current_level: Optional[float] = None,
    thresholds: Optional[StatusThresholds] = None,
    check_level: bool = False,
) -> StatusBand:
    """
    Map a fill percentage and forecast to a status band.

    With check_level=True the caller also vouches for current_level, and a
    percentage without a level is treated as inconsistent (unknown).
    """
    t = thresholds or DEFAULT_THRESHOLDS

    if percent_full is None:
        return StatusBand.UNKNOWN
    if not 0.0 <= percent_full <= 100.0:
        return StatusBand.UNKNOWN
    if check_level and current_level is None:
        return StatusBand.UNKNOWN

    if percent_full < t.critical_percent:
        return StatusBand.CRITICAL
    if days_to_min is not None and days_to_min <= t.critical_days:
        return StatusBand.CRITICAL
    if percent_full < t.low_percent:
        return StatusBand.LOW
    return StatusBand.NORMAL
