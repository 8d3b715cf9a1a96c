from pydantic import BaseModel, field_serializer, field_validator
from datetime import datetime
from typing import Optional
import enum

from tankalert.services.field_mapping import parse_timestamp


class StatusBand(str, enum.Enum):
    CRITICAL = "critical"
    LOW = "low"
    NORMAL = "normal"
    UNKNOWN = "unknown"


class Confidence(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReadingPoint(BaseModel):
    timestamp: datetime
    value: float
    recorded_by: Optional[str] = None

    class Config:
        frozen = True

    @field_validator('timestamp')
    @classmethod
    def naive_utc(cls, v):
        # Readings are compared against naive UTC as_of values
        return parse_timestamp(v)


class TankCalibration(BaseModel):
    tank_id: int
    location: str = "Unknown Location"
    product_type: Optional[str] = None
    safe_level: Optional[float] = None
    min_level: float = 0.0
    group_id: Optional[int] = None
    group_name: Optional[str] = None
    subgroup: Optional[str] = None

    class Config:
        frozen = True


class TankSnapshot(BaseModel):
    """Immutable view of one tank at query time: calibration plus its reading history."""
    calibration: TankCalibration
    readings: tuple[ReadingPoint, ...] = ()

    class Config:
        frozen = True


class StatusThresholds(BaseModel):
    critical_percent: float = 15.0
    low_percent: float = 30.0
    critical_days: float = 3.0
    window_days: int = 7

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, settings=None) -> "StatusThresholds":
        if settings is None:
            from tankalert.config import settings
        return cls(
            critical_percent=settings.critical_percent,
            low_percent=settings.low_percent,
            critical_days=settings.critical_days,
            window_days=settings.rolling_window_days,
        )


class ConsumptionEstimate(BaseModel):
    tank_id: Optional[int] = None
    as_of: datetime
    window_days: int
    rate_per_day: Optional[float] = None
    data_points: int = 0
    confidence: Confidence = Confidence.LOW

    class Config:
        frozen = True

    @property
    def has_rate(self) -> bool:
        return self.rate_per_day is not None


class FillStatus(BaseModel):
    tank_id: int
    location: str
    product_type: Optional[str] = None
    group_id: Optional[int] = None
    group_name: Optional[str] = None
    subgroup: Optional[str] = None
    safe_level: Optional[float] = None
    min_level: float = 0.0
    
    current_level: Optional[float] = None
    last_reading_at: Optional[datetime] = None
    last_reading_by: Optional[str] = None
    percent_full: Optional[float] = None
    
    rate_per_day: Optional[float] = None
    prev_day_used: Optional[float] = None
    days_to_min: Optional[float] = None
    usable_capacity: Optional[float] = None
    ullage: Optional[float] = None
    
    status: StatusBand = StatusBand.UNKNOWN
    calibration_issue: Optional[str] = None
    error: Optional[str] = None

    class Config:
        frozen = True

    @field_serializer('last_reading_at')
    def serialize_dt(self, dt: Optional[datetime], _info):
        if dt is None: return None
        if dt.tzinfo is None:
            return dt.isoformat() + 'Z'
        return dt.isoformat()
