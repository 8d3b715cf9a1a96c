from typing import Optional

from tankalert.services.calibration import round_half_up


def days_to_min(current_level: Optional[float], min_level: Optional[float], rate_per_day: Optional[float]) -> Optional[float]:
    """
    Days until the level reaches min_level at the current rate.

    Only defined while consuming (negative rate). A result below zero means
    the tank is already under its minimum and is returned as is.
    """
    if current_level is None or rate_per_day is None or rate_per_day >= 0:
        return None
    return round_half_up((current_level - (min_level or 0.0)) / abs(rate_per_day), 1)
