# clinic/schemas/doctors/doctor.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class DoctorBase(BaseModel):
    name: str
    specialty: str
    email: str
    phone: str
    working_hours: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Weekday (0 = Monday, or its name) -> list of HH:MM-HH:MM ranges",
    )


class DoctorCreate(DoctorBase):
    password: str


class DoctorUpdate(BaseModel):
    name: Optional[str] = None
    specialty: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    working_hours: Optional[Dict[str, List[str]]] = None


class DoctorResponse(DoctorBase):
    id: int
