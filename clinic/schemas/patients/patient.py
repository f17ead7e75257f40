# clinic/schemas/patients/patient.py
from pydantic import BaseModel


class PatientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    address: str
