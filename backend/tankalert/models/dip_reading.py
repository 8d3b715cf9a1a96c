from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, String, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from tankalert.database import Base


class DipReading(Base):
    """Append-only fuel level measurement, manual dip or telemetry."""
    __tablename__ = "dip_readings"

    id = Column(Integer, primary_key=True, index=True)
    tank_id = Column(Integer, ForeignKey("fuel_tanks.id"), nullable=False, index=True)
    value = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    recorded_by = Column(String(255), nullable=True)

    # Relationships
    tank = relationship("FuelTank", back_populates="dip_readings")

    # Composite index for window queries
    __table_args__ = (
        Index('ix_dip_readings_tank_created_at', 'tank_id', 'created_at'),
    )

    def __repr__(self):
        return f"<DipReading(id={self.id}, created_at='{self.created_at}', value={self.value})>"
