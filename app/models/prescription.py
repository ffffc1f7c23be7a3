from sqlalchemy import Column, Integer, DateTime, Text, JSON
from datetime import datetime

from ..core.database import Base

class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)

    # The patient is derived through the appointment, never stored here
    appointment_id = Column(Integer, nullable=False, index=True)

    # Ordered list of {"name", "dosage", "frequency"}
    medications = Column(JSON, nullable=False)
    instructions = Column(Text, nullable=False, default="")
    issued_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Prescription(id={self.id}, appointment_id={self.appointment_id})>"
