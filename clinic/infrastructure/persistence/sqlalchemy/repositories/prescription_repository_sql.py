from typing import Optional
from sqlmodel import Session, select

from .....application.ports.prescription_repo import PrescriptionRepository, PrescriptionDto
from .....db.models import Prescription


class SqlPrescriptionRepository(PrescriptionRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, p: Prescription) -> PrescriptionDto:
        return PrescriptionDto(
            id=p.id,
            appointment_id=p.appointment_id,
            patient_name=p.patient_name,
            medication=p.medication,
            dosage=p.dosage,
            doctor_notes=p.doctor_notes,
        )

    def create(self, appointment_id: int, patient_name: str, medication: str, dosage: str, doctor_notes: Optional[str]) -> PrescriptionDto:
        p = Prescription(
            appointment_id=appointment_id,
            patient_name=patient_name,
            medication=medication,
            dosage=dosage,
            doctor_notes=doctor_notes,
        )
        self.session.add(p)
        self.session.commit()
        self.session.refresh(p)
        return self._to_dto(p)

    def get_by_appointment(self, appointment_id: int) -> Optional[PrescriptionDto]:
        p = self.session.exec(select(Prescription).where(Prescription.appointment_id == appointment_id)).first()
        return self._to_dto(p) if p else None
