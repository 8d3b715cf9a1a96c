import logging
from datetime import datetime
from tankalert.database import SessionLocal
from tankalert.schemas.analytics import StatusBand
from tankalert.services.tank_service import TankService

logger = logging.getLogger(__name__)


def build_digest(statuses) -> dict:
    """Group evaluated tanks by band for the notification collaborator."""
    digest = {band.value: [] for band in StatusBand}
    for status in statuses:
        digest[status.status.value].append(status)

    # Soonest to run dry first; undefined forecasts last
    for band in digest:
        digest[band].sort(key=lambda s: (s.days_to_min is None, s.days_to_min or 0.0, s.location))
    return digest


def status_digest_job():
    """
    Scheduled job: evaluate every tank and log the ones that need attention.
    Nothing is persisted; the dashboard recomputes on request.
    """
    logger.info("Starting scheduled tank status digest")
    session = SessionLocal()
    digest = None
    try:
        statuses = TankService(session).fleet_status(as_of=datetime.utcnow())
        digest = build_digest(statuses)

        for status in digest[StatusBand.CRITICAL.value]:
            logger.warning(
                f"CRITICAL: {status.location} at {status.percent_full}% "
                f"(days to min: {status.days_to_min}, rate: {status.rate_per_day}/day)"
            )
        for status in digest[StatusBand.LOW.value]:
            logger.info(f"LOW: {status.location} at {status.percent_full}% (days to min: {status.days_to_min})")
        for status in digest[StatusBand.UNKNOWN.value]:
            reason = status.error or status.calibration_issue or "insufficient readings"
            logger.info(f"UNKNOWN: {status.location} ({reason})")

        logger.info(
            f"Digest: {len(statuses)} tanks, "
            + ", ".join(f"{band}={len(items)}" for band, items in digest.items())
        )
    except Exception as e:
        logger.error(f"Status digest job failed: {e}")
        session.rollback()
    finally:
        session.close()
    logger.info("Scheduled tank status digest completed")
    return digest
