# clinic/db/models/people/doctor.py
from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from pydantic import NaiveDatetime

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, index=True)
    specialty: str = Field(max_length=50, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: str = Field(max_length=10)
    password_hash: str
    # JSON object: weekday index ("0" = Monday) -> ["HH:MM-HH:MM", ...]
    working_hours: str = Field(default="{}")
    created_at: NaiveDatetime = Field(default_factory=datetime.utcnow)

    # Relationships
    appointments: List["Appointment"] = Relationship(back_populates="doctor")
