from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from tankalert.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    registration = Column(String(50), unique=True, nullable=False, index=True)
    fleet = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    safety_events = relationship("SafetyEvent", back_populates="vehicle")

    def __repr__(self):
        return f"<Vehicle(id={self.id}, registration='{self.registration}')>"
