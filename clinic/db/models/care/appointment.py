# clinic/db/models/care/appointment.py
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import UniqueConstraint
from pydantic import NaiveDatetime
from datetime import datetime

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    # exact duplicate starts only; overlaps are left to the schedule lock
    __table_args__ = (UniqueConstraint("doctor_id", "appointment_time", name="uq_appointment_doctor_time"),)
    id: Optional[int] = Field(default=None, primary_key=True)
    doctor_id: int = Field(foreign_key="doctors.id", index=True)
    patient_id: int = Field(foreign_key="patients.id", index=True)
    # clinic-local wall time, stored without tzinfo
    appointment_time: NaiveDatetime = Field(index=True)
    status: int = Field(default=0)  # 0 = scheduled, 1 = completed
    created_at: NaiveDatetime = Field(default_factory=datetime.utcnow)

    # Relationships
    doctor: Optional["Doctor"] = Relationship(back_populates="appointments")
    patient: Optional["Patient"] = Relationship(back_populates="appointments")
