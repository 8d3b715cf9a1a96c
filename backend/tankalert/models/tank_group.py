from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from tankalert.database import Base


class TankGroup(Base):
    __tablename__ = "tank_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    tanks = relationship("FuelTank", back_populates="group")

    def __repr__(self):
        return f"<TankGroup(id={self.id}, name='{self.name}')>"
