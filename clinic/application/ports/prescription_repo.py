from dataclasses import dataclass
from typing import Optional


@dataclass
class PrescriptionDto:
    id: int
    appointment_id: int
    patient_name: str
    medication: str
    dosage: str
    doctor_notes: Optional[str]


class PrescriptionRepository:
    def create(self, appointment_id: int, patient_name: str, medication: str, dosage: str, doctor_notes: Optional[str]) -> PrescriptionDto:
        ...

    def get_by_appointment(self, appointment_id: int) -> Optional[PrescriptionDto]:
        ...
