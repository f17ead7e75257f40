from typing import Optional
from sqlmodel import Session, select

from .....application.ports.patient_repo import PatientRepository, PatientDto
from .....db.models import Patient


class SqlPatientRepository(PatientRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, p: Patient) -> PatientDto:
        return PatientDto(
            id=p.id,
            name=p.name,
            email=p.email,
            phone=p.phone,
            address=p.address,
            password_hash=p.password_hash,
        )

    def get_patient(self, patient_id: int) -> Optional[PatientDto]:
        p = self.session.exec(select(Patient).where(Patient.id == patient_id)).first()
        return self._to_dto(p) if p else None

    def get_by_email(self, email: str) -> Optional[PatientDto]:
        p = self.session.exec(select(Patient).where(Patient.email == email)).first()
        return self._to_dto(p) if p else None

    def get_by_phone(self, phone: str) -> Optional[PatientDto]:
        p = self.session.exec(select(Patient).where(Patient.phone == phone)).first()
        return self._to_dto(p) if p else None

    def create(self, name: str, email: str, phone: str, address: str, password_hash: str) -> PatientDto:
        p = Patient(name=name, email=email, phone=phone, address=address, password_hash=password_hash)
        self.session.add(p)
        self.session.commit()
        self.session.refresh(p)
        return self._to_dto(p)
