from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from tankalert.database import Base


class SafetyEvent(Base):
    """Safety camera event imported from an external system with free-text driver and vehicle fields."""
    __tablename__ = "safety_events"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(100), unique=True, nullable=False, index=True)
    event_type = Column(String(100), nullable=True)
    occurred_at = Column(DateTime, nullable=False, index=True)
    driver_name = Column(String(255), nullable=True)
    vehicle_registration = Column(String(50), nullable=True)
    
    # Association results
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True, index=True)
    driver_match_confidence = Column(Float, nullable=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True, index=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    driver = relationship("Driver", back_populates="safety_events")
    vehicle = relationship("Vehicle", back_populates="safety_events")

    def __repr__(self):
        return f"<SafetyEvent(id={self.id}, external_id='{self.external_id}')>"
