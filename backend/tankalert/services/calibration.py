from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import logging

from tankalert.schemas.analytics import TankCalibration

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

MISSING_SAFE_LEVEL = "missing_safe_level"
NON_POSITIVE_SAFE_LEVEL = "non_positive_safe_level"
SAFE_LEVEL_NOT_ABOVE_MIN = "safe_level_not_above_min"


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like SQL ROUND(): halves go away from zero, not to even."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calibration_issue(safe_level: Optional[float], min_level: Optional[float]) -> Optional[str]:
    """Return a reason code when the calibration cannot yield a percentage, else None."""
    if safe_level is None:
        return MISSING_SAFE_LEVEL
    if safe_level <= 0:
        return NON_POSITIVE_SAFE_LEVEL
    if safe_level <= (min_level or 0.0):
        return SAFE_LEVEL_NOT_ABOVE_MIN
    return None


def check_calibration(calibration: TankCalibration) -> Optional[str]:
    issue = calibration_issue(calibration.safe_level, calibration.min_level)
    if issue:
        logger.warning(
            f"Tank {calibration.tank_id} ({calibration.location}) has invalid calibration: "
            f"{issue} (safe_level={calibration.safe_level}, min_level={calibration.min_level})"
        )
    return issue


def window_start(as_of: datetime, window_days: int) -> datetime:
    return as_of - timedelta(days=window_days)
