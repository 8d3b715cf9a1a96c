from typing import List, Optional, Dict, Any
from datetime import datetime, timedelta
from sqlalchemy.orm import Session, joinedload
from tankalert.models import FuelTank, DipReading
from tankalert.schemas.analytics import (
    ReadingPoint, TankCalibration, TankSnapshot, StatusThresholds, FillStatus, ConsumptionEstimate,
)
from tankalert.schemas.tank import FuelTankCreate
from tankalert.services.calibration import calibration_issue
from tankalert.services.field_mapping import normalize_tank_record, normalize_reading_record, parse_timestamp
from tankalert.services.fill_status import evaluate_tank, evaluate_fleet, consumption_for
import csv
import io
import logging
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def calibration_from_tank(tank: FuelTank) -> TankCalibration:
    return TankCalibration(
        tank_id=tank.id,
        location=tank.location or "Unknown Location",
        product_type=tank.product_type,
        safe_level=tank.safe_level,
        min_level=tank.min_level or 0.0,
        group_id=tank.group_id,
        group_name=tank.group.name if tank.group else None,
        subgroup=tank.subgroup,
    )


def to_point(reading: DipReading) -> ReadingPoint:
    return ReadingPoint(
        timestamp=reading.created_at,
        value=reading.value,
        recorded_by=reading.recorded_by,
    )


class TankService:
    def __init__(self, db: Session, thresholds: Optional[StatusThresholds] = None):
        self.db = db
        self.thresholds = thresholds or StatusThresholds.from_settings()

    def get_tank(self, tank_id: int) -> FuelTank:
        tank = self.db.query(FuelTank).options(joinedload(FuelTank.group)).filter(FuelTank.id == tank_id).first()
        if not tank:
            raise HTTPException(status_code=404, detail="Tank not found")
        return tank

    def create_tank(self, raw: Dict[str, Any]) -> FuelTank:
        """Create a tank from a record that may use any of the known field aliases."""
        try:
            record = FuelTankCreate(**normalize_tank_record(raw))
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise HTTPException(status_code=400, detail=f"Invalid tank record: {messages}")
        except (ValueError, TypeError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid tank record: {e}")

        tank = FuelTank(**record.model_dump())
        self.db.add(tank)
        self.db.commit()
        self.db.refresh(tank)

        issue = calibration_issue(tank.safe_level, tank.min_level)
        if issue:
            logger.warning(f"Tank {tank.id} ({tank.location}) created with invalid calibration: {issue}")
        return tank

    def add_reading(self, tank_id: int, value: float, timestamp: Optional[datetime] = None,
                    recorded_by: Optional[str] = None) -> DipReading:
        """
        Append a single reading. A reading with the same tank and timestamp
        is returned instead of duplicated.
        """
        self.get_tank(tank_id)
        timestamp = parse_timestamp(timestamp) if timestamp else datetime.utcnow()

        existing = self.db.query(DipReading).filter(
            DipReading.tank_id == tank_id,
            DipReading.created_at == timestamp
        ).first()

        if existing:
            return existing

        reading = DipReading(
            tank_id=tank_id,
            value=value,
            created_at=timestamp,
            recorded_by=recorded_by
        )
        self.db.add(reading)
        self.db.commit()
        self.db.refresh(reading)
        return reading

    def process_readings_csv(self, file_content: str, tank_id: int) -> dict:
        """
        Import dip readings from CSV. Column names are mapped through the
        reading field aliases; rows that cannot be parsed are counted and skipped.
        """
        self.get_tank(tank_id)

        reader = csv.DictReader(io.StringIO(file_content))

        raw_readings = []
        skipped_rows = 0
        for row in reader:
            try:
                raw_readings.append(normalize_reading_record(row))
            except (ValueError, KeyError):
                skipped_rows += 1
                continue

        if not raw_readings:
            return {
                "message": "No valid readings found",
                "new_readings": 0,
                "skipped_duplicates": 0,
                "skipped_rows": skipped_rows,
                "total_processed": 0
            }

        raw_readings.sort(key=lambda r: r['timestamp'])

        existing_timestamps = set(
            r.created_at for r in self.db.query(DipReading.created_at).filter(
                DipReading.tank_id == tank_id
            ).all()
        )

        new_count = 0
        skipped_count = 0

        for reading in raw_readings:
            if reading['timestamp'] in existing_timestamps:
                skipped_count += 1
                continue

            self.db.add(DipReading(
                tank_id=tank_id,
                value=reading['value'],
                created_at=reading['timestamp'],
                recorded_by=reading['recorded_by']
            ))
            existing_timestamps.add(reading['timestamp'])
            new_count += 1

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to import readings for tank {tank_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to import readings: {e}")
        logger.info(f"Imported {new_count} readings for tank {tank_id} ({skipped_count} duplicates, {skipped_rows} bad rows)")

        return {
            "message": "Upload complete",
            "new_readings": new_count,
            "skipped_duplicates": skipped_count,
            "skipped_rows": skipped_rows,
            "total_processed": len(raw_readings)
        }

    def get_readings(self, tank_id: int, days: int = 30, as_of: Optional[datetime] = None) -> List[DipReading]:
        self.get_tank(tank_id)
        as_of = as_of or datetime.utcnow()
        return self.db.query(DipReading).filter(
            DipReading.tank_id == tank_id,
            DipReading.created_at >= as_of - timedelta(days=days),
            DipReading.created_at <= as_of
        ).order_by(DipReading.created_at, DipReading.id).all()

    def _latest_reading(self, tank_id: int, as_of: datetime) -> Optional[DipReading]:
        return self.db.query(DipReading).filter(
            DipReading.tank_id == tank_id,
            DipReading.created_at <= as_of
        ).order_by(DipReading.created_at.desc(), DipReading.id.desc()).first()

    def build_snapshots(self, tanks: List[FuelTank], as_of: datetime) -> List[TankSnapshot]:
        """
        Snapshot each tank: readings inside the trailing window, plus the latest
        reading when it falls before the window so the stale level is still reported.
        """
        if not tanks:
            return []

        start = as_of - timedelta(days=self.thresholds.window_days)
        rows = self.db.query(DipReading).filter(
            DipReading.tank_id.in_([t.id for t in tanks]),
            DipReading.created_at >= start,
            DipReading.created_at <= as_of
        ).order_by(DipReading.created_at, DipReading.id).all()

        by_tank: Dict[int, List[ReadingPoint]] = {t.id: [] for t in tanks}
        for r in rows:
            by_tank[r.tank_id].append(to_point(r))

        snapshots = []
        for tank in tanks:
            points = by_tank[tank.id]
            if not points:
                latest = self._latest_reading(tank.id, as_of)
                if latest:
                    points = [to_point(latest)]
            snapshots.append(TankSnapshot(calibration=calibration_from_tank(tank), readings=tuple(points)))
        return snapshots

    def tank_status(self, tank_id: int, as_of: Optional[datetime] = None) -> FillStatus:
        as_of = as_of or datetime.utcnow()
        snapshot = self.build_snapshots([self.get_tank(tank_id)], as_of)[0]
        return evaluate_tank(snapshot, as_of, self.thresholds)

    def tank_consumption(self, tank_id: int, as_of: Optional[datetime] = None) -> ConsumptionEstimate:
        as_of = as_of or datetime.utcnow()
        snapshot = self.build_snapshots([self.get_tank(tank_id)], as_of)[0]
        return consumption_for(snapshot, as_of, self.thresholds)

    def fleet_status(self, group_id: Optional[int] = None, subgroup: Optional[str] = None,
                     as_of: Optional[datetime] = None) -> List[FillStatus]:
        as_of = as_of or datetime.utcnow()
        query = self.db.query(FuelTank).options(joinedload(FuelTank.group))
        if group_id is not None:
            query = query.filter(FuelTank.group_id == group_id)
        if subgroup:
            query = query.filter(FuelTank.subgroup == subgroup)
        tanks = query.order_by(FuelTank.location, FuelTank.id).all()

        return evaluate_fleet(self.build_snapshots(tanks, as_of), as_of, self.thresholds)
