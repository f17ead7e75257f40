# clinic/db/models/care/prescription.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
from pydantic import NaiveDatetime

class Prescription(SQLModel, table=True):
    __tablename__ = "prescriptions"
    id: Optional[int] = Field(default=None, primary_key=True)
    # not a foreign key: prescriptions outlive cancelled appointments
    appointment_id: int = Field(index=True, unique=True)
    patient_name: str = Field(max_length=100)
    medication: str = Field(max_length=100)
    dosage: str
    doctor_notes: Optional[str] = Field(default=None, max_length=200)
    created_at: NaiveDatetime = Field(default_factory=datetime.utcnow)
