from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Query, Body
from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any

from tankalert.database import get_db
from tankalert.schemas import (
    FillStatus, ConsumptionEstimate, StatusBand, FuelTankResponse,
    DipReadingCreate, DipReadingResponse, ReadingImportResult,
)
from tankalert.services.tank_service import TankService

router = APIRouter()


@router.get("", response_model=List[FillStatus])
async def list_tank_status(
    group_id: Optional[int] = Query(None),
    subgroup: Optional[str] = Query(None),
    status: Optional[StatusBand] = Query(None, description="Only tanks in this status band"),
    db: Session = Depends(get_db)
):
    """Current fill status for every tank, recomputed from the readings."""
    statuses = TankService(db).fleet_status(group_id=group_id, subgroup=subgroup)
    if status is not None:
        statuses = [s for s in statuses if s.status == status]
    return statuses


@router.post("", response_model=FuelTankResponse, status_code=201)
async def create_tank(
    record: Dict[str, Any] = Body(..., description="Tank record; known field aliases are accepted"),
    db: Session = Depends(get_db)
):
    return TankService(db).create_tank(record)


@router.get("/alerts", response_model=List[FillStatus])
async def get_alerts(
    group_id: Optional[int] = Query(None),
    subgroup: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Critical and low tanks, critical first, then by days to minimum."""
    statuses = TankService(db).fleet_status(group_id=group_id, subgroup=subgroup)
    order = {StatusBand.CRITICAL: 0, StatusBand.LOW: 1}
    alerts = [s for s in statuses if s.status in order]
    alerts.sort(key=lambda s: (
        order[s.status],
        s.days_to_min is None,
        s.days_to_min if s.days_to_min is not None else 0.0,
        s.percent_full if s.percent_full is not None else 0.0,
    ))
    return alerts


@router.get("/{tank_id}/status", response_model=FillStatus)
async def get_tank_status(tank_id: int, db: Session = Depends(get_db)):
    return TankService(db).tank_status(tank_id)


@router.get("/{tank_id}/consumption", response_model=ConsumptionEstimate)
async def get_tank_consumption(tank_id: int, db: Session = Depends(get_db)):
    """Rolling consumption rate over the configured trailing window."""
    return TankService(db).tank_consumption(tank_id)


@router.get("/{tank_id}/readings", response_model=List[DipReadingResponse])
async def get_tank_readings(
    tank_id: int,
    days: int = Query(30, ge=1, description="Number of days to fetch"),
    db: Session = Depends(get_db)
):
    return TankService(db).get_readings(tank_id, days=days)


@router.post("/{tank_id}/readings", response_model=DipReadingResponse, status_code=201)
async def add_tank_reading(
    tank_id: int,
    reading: DipReadingCreate,
    db: Session = Depends(get_db)
):
    return TankService(db).add_reading(
        tank_id,
        reading.value,
        timestamp=reading.created_at,
        recorded_by=reading.recorded_by,
    )


@router.post("/{tank_id}/readings/upload", response_model=ReadingImportResult)
async def upload_tank_readings(
    tank_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """
    Upload dip readings as CSV.
    Accepts timestamp/value columns under any of the known aliases
    (e.g. t,g or Read Date,Tank Volume). Deduplicates on tank + timestamp.
    """
    content = await file.read()
    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded CSV")

    return TankService(db).process_readings_csv(text, tank_id)
