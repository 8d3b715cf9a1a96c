from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from tankalert.database import Base


class FuelTank(Base):
    """Tank identity and calibration. safe_level is the fill ceiling, min_level the usable floor."""
    __tablename__ = "fuel_tanks"

    id = Column(Integer, primary_key=True, index=True)
    location = Column(String(255), nullable=False, index=True)
    product_type = Column(String(100), nullable=True)
    safe_level = Column(Float, nullable=True)
    min_level = Column(Float, nullable=True, default=0.0)
    
    # Access scoping
    group_id = Column(Integer, ForeignKey("tank_groups.id"), nullable=True, index=True)
    subgroup = Column(String(255), nullable=True, index=True)
    
    address = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    group = relationship("TankGroup", back_populates="tanks")
    dip_readings = relationship("DipReading", back_populates="tank")

    def __repr__(self):
        return f"<FuelTank(id={self.id}, location='{self.location}')>"
