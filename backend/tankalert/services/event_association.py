from typing import Dict, List, Optional
import logging
from sqlalchemy.orm import Session
from sqlalchemy import or_

from tankalert.config import settings
from tankalert.models import SafetyEvent, Driver, Vehicle
from tankalert.schemas.association import MatchCandidate, AssociationSummary
from tankalert.services.name_matching import match_records, normalize_registration

logger = logging.getLogger(__name__)


class EventAssociationService:
    """Links safety events to driver and vehicle master records."""

    def __init__(self, db: Session):
        self.db = db

    def associate(self, threshold: Optional[float] = None, review_threshold: Optional[float] = None) -> AssociationSummary:
        """
        Associate events that are missing a driver or vehicle.

        Drivers are matched by name similarity and only confident matches are
        written; review and unmatched names are returned for manual handling.
        Vehicles are matched on normalized registration.
        """
        threshold = settings.match_threshold if threshold is None else threshold
        review_threshold = settings.review_threshold if review_threshold is None else review_threshold

        events = self.db.query(SafetyEvent).filter(
            or_(SafetyEvent.driver_id.is_(None), SafetyEvent.vehicle_id.is_(None))
        ).all()
        logger.info(f"Associating {len(events)} safety events (threshold={threshold}, review={review_threshold})")

        try:
            drivers_linked, report = self._associate_drivers(events, threshold, review_threshold)
            vehicles_linked, unmatched_regs, ambiguous_regs = self._associate_vehicles(events)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if report.review:
            logger.info(f"{len(report.review)} driver names need manual review")
        if report.unmatched:
            logger.warning(f"{len(report.unmatched)} driver names had no candidate driver")

        return AssociationSummary(
            events_examined=len(events),
            drivers_associated=drivers_linked,
            vehicles_associated=vehicles_linked,
            driver_report=report,
            unmatched_registrations=unmatched_regs,
            ambiguous_registrations=ambiguous_regs,
        )

    def _associate_drivers(self, events: List[SafetyEvent], threshold: float, review_threshold: float):
        pending = [e for e in events if e.driver_id is None and e.driver_name]
        names = sorted({e.driver_name.strip() for e in pending if e.driver_name.strip()})

        drivers = self.db.query(Driver).filter(Driver.is_active == True).all()
        targets = [MatchCandidate(key=str(d.id), name=d.full_name) for d in drivers]
        sources = [MatchCandidate(key=name, name=name) for name in names]

        report = match_records(sources, targets, threshold=threshold, review_threshold=review_threshold)

        confident = {m.source_key: m for m in report.matches}
        linked = 0
        for event in pending:
            match = confident.get(event.driver_name.strip())
            if match:
                event.driver_id = int(match.target_key)
                event.driver_match_confidence = match.confidence
                linked += 1
        return linked, report

    def _associate_vehicles(self, events: List[SafetyEvent]):
        by_registration: Dict[str, int] = {}
        ambiguous = set()
        for vehicle in self.db.query(Vehicle).order_by(Vehicle.id).all():
            key = normalize_registration(vehicle.registration)
            if key in by_registration:
                logger.warning(f"Vehicles {by_registration[key]} and {vehicle.id} share registration {key}; not linking it")
                ambiguous.add(key)
                continue
            by_registration[key] = vehicle.id
        for key in ambiguous:
            del by_registration[key]

        linked = 0
        unmatched = set()
        ambiguous_seen = set()
        for event in events:
            if event.vehicle_id is not None or not event.vehicle_registration:
                continue
            key = normalize_registration(event.vehicle_registration)
            if key in ambiguous:
                ambiguous_seen.add(event.vehicle_registration.strip())
                continue
            vehicle_id = by_registration.get(key)
            if vehicle_id is None:
                unmatched.add(event.vehicle_registration.strip())
                continue
            event.vehicle_id = vehicle_id
            linked += 1
        return linked, sorted(unmatched), sorted(ambiguous_seen)
