from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class FuelTankBase(BaseModel):
    location: str
    product_type: Optional[str] = "Diesel"
    safe_level: Optional[float] = None
    min_level: Optional[float] = 0.0
    group_id: Optional[int] = None
    subgroup: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator('safe_level')
    @classmethod
    def safe_level_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError('safe_level must be positive')
        return v

    @field_validator('min_level')
    @classmethod
    def min_level_not_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError('min_level cannot be negative')
        return v


class FuelTankCreate(FuelTankBase):
    pass


class FuelTankResponse(FuelTankBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DipReadingCreate(BaseModel):
    value: float = Field(..., ge=0, allow_inf_nan=False)
    created_at: Optional[datetime] = None
    recorded_by: Optional[str] = None


class DipReadingResponse(BaseModel):
    id: int
    tank_id: int
    value: float
    created_at: datetime
    recorded_by: Optional[str] = None

    class Config:
        from_attributes = True


class ReadingImportResult(BaseModel):
    message: str
    new_readings: int
    skipped_duplicates: int
    skipped_rows: int
    total_processed: int
