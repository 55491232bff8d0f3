"""Appointment table definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from physiopro.database import Base


class AppointmentRecord(Base):
    """Persisted appointment row. ``row_id`` keeps insertion order."""
    __tablename__ = "appointments"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    patient_id = Column(String, nullable=False)
    clinician_id = Column(String, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False)
    appointment_type = Column(String, nullable=False)
    title = Column(String)
    notes = Column(String)
