# clinic/schemas/prescriptions/prescription.py
from pydantic import BaseModel
from typing import Optional


class PrescriptionCreate(BaseModel):
    appointment_id: int
    patient_name: str
    medication: str
    dosage: str
    doctor_notes: Optional[str] = None


class PrescriptionResponse(PrescriptionCreate):
    id: int
