"""
Per-tank fill status, recomputed from an immutable snapshot on every call.

Nothing here is cached or stored: callers build a TankSnapshot from the
reading store and get a fresh FillStatus back.
"""
from datetime import datetime
from typing import Iterable, List, Optional
import logging

from tankalert.schemas.analytics import (
    TankSnapshot, FillStatus, StatusBand, StatusThresholds, ConsumptionEstimate,
)
from tankalert.services.calibration import check_calibration, window_start
from tankalert.services.field_mapping import parse_timestamp
from tankalert.services.consumption import estimate_consumption, previous_day_change
from tankalert.services.fill_level import latest_reading, percent_full, usable_capacity, ullage
from tankalert.services.forecast import days_to_min
from tankalert.services.status import classify_status

logger = logging.getLogger(__name__)


def _base_fields(snapshot: TankSnapshot) -> dict:
    cal = snapshot.calibration
    return {
        'tank_id': cal.tank_id,
        'location': cal.location,
        'product_type': cal.product_type,
        'group_id': cal.group_id,
        'group_name': cal.group_name,
        'subgroup': cal.subgroup,
        'safe_level': cal.safe_level,
        'min_level': cal.min_level,
    }


def evaluate_tank(
    snapshot: TankSnapshot,
    as_of: Optional[datetime] = None,
    thresholds: Optional[StatusThresholds] = None,
) -> FillStatus:
    t = thresholds or StatusThresholds()
    as_of = parse_timestamp(as_of) if as_of else datetime.utcnow()
    cal = snapshot.calibration

    issue = check_calibration(cal)
    estimate = estimate_consumption(snapshot.readings, as_of, t.window_days, tank_id=cal.tank_id)

    latest = latest_reading(snapshot.readings)
    current_level = latest.value if latest else None

    # A level older than the window is stale and does not produce a percentage
    fresh = latest is not None and window_start(as_of, t.window_days) <= latest.timestamp <= as_of
    pct = percent_full(current_level, cal.safe_level, cal.min_level) if fresh else None

    days = days_to_min(current_level, cal.min_level, estimate.rate_per_day)

    if estimate.rate_per_day is None:
        status = StatusBand.UNKNOWN
    else:
        status = classify_status(pct, days, current_level, thresholds=t, check_level=True)

    return FillStatus(
        **_base_fields(snapshot),
        current_level=current_level,
        last_reading_at=latest.timestamp if latest else None,
        last_reading_by=latest.recorded_by if latest else None,
        percent_full=pct,
        rate_per_day=estimate.rate_per_day,
        prev_day_used=previous_day_change(snapshot.readings),
        days_to_min=days,
        usable_capacity=usable_capacity(cal.safe_level, cal.min_level),
        ullage=ullage(current_level, cal.safe_level, cal.min_level),
        status=status,
        calibration_issue=issue,
    )


def evaluate_fleet(
    snapshots: Iterable[TankSnapshot],
    as_of: Optional[datetime] = None,
    thresholds: Optional[StatusThresholds] = None,
) -> List[FillStatus]:
    """Evaluate tanks independently. A failure on one tank yields an unknown status for it only."""
    as_of = parse_timestamp(as_of) if as_of else datetime.utcnow()
    results = []
    for snapshot in snapshots:
        try:
            results.append(evaluate_tank(snapshot, as_of, thresholds))
        except Exception as e:
            logger.error(f"Error evaluating tank {snapshot.calibration.tank_id}: {e}")
            results.append(FillStatus(
                **_base_fields(snapshot),
                status=StatusBand.UNKNOWN,
                error=str(e),
            ))
    return results


def consumption_for(
    snapshot: TankSnapshot,
    as_of: Optional[datetime] = None,
    thresholds: Optional[StatusThresholds] = None,
) -> ConsumptionEstimate:
    t = thresholds or StatusThresholds()
    return estimate_consumption(snapshot.readings, as_of or datetime.utcnow(), t.window_days, tank_id=snapshot.calibration.tank_id)
