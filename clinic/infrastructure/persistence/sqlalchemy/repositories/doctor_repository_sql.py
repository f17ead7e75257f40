import json
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlmodel import Session, select

from .....application.errors import NotFoundError
from .....application.ports.doctor_repo import DoctorRepository, DoctorDto
from .....db.models import Doctor


def dump_working_hours(hours: Dict[int, List[str]]) -> str:
    return json.dumps({str(k): list(v) for k, v in sorted(hours.items())})


def load_working_hours(raw: Optional[str]) -> Dict[int, List[str]]:
    return {int(k): list(v) for k, v in json.loads(raw or "{}").items()}


class SqlDoctorRepository(DoctorRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, d: Doctor) -> DoctorDto:
        return DoctorDto(
            id=d.id,
            name=d.name,
            specialty=d.specialty,
            email=d.email,
            phone=d.phone,
            working_hours=load_working_hours(d.working_hours),
            password_hash=d.password_hash,
        )

    def _get(self, doctor_id: int) -> Optional[Doctor]:
        return self.session.exec(select(Doctor).where(Doctor.id == doctor_id)).first()

    def get_doctor(self, doctor_id: int) -> Optional[DoctorDto]:
        d = self._get(doctor_id)
        return self._to_dto(d) if d else None

    def get_by_email(self, email: str) -> Optional[DoctorDto]:
        d = self.session.exec(select(Doctor).where(Doctor.email == email)).first()
        return self._to_dto(d) if d else None

    def list_all(self) -> List[DoctorDto]:
        rows = self.session.exec(select(Doctor).order_by(Doctor.name)).all()
        return [self._to_dto(d) for d in rows]

    def search(self, name: Optional[str], specialty: Optional[str]) -> List[DoctorDto]:
        query = select(Doctor)
        if name:
            query = query.where(Doctor.name.ilike(f"%{name}%"))
        if specialty:
            query = query.where(func.lower(Doctor.specialty) == specialty.lower())
        rows = self.session.exec(query.order_by(Doctor.name)).all()
        return [self._to_dto(d) for d in rows]

    def create(self, name: str, specialty: str, email: str, phone: str, password_hash: str, working_hours: Dict[int, List[str]]) -> DoctorDto:
        d = Doctor(
            name=name,
            specialty=specialty,
            email=email,
            phone=phone,
            password_hash=password_hash,
            working_hours=dump_working_hours(working_hours),
        )
        self.session.add(d)
        self.session.commit()
        self.session.refresh(d)
        return self._to_dto(d)

    def update(self, doctor_id: int, fields: Dict[str, object]) -> DoctorDto:
        d = self._get(doctor_id)
        if not d:
            raise NotFoundError("Doctor not found")
        for key, value in fields.items():
            if key == "working_hours":
                value = dump_working_hours(value)
            if hasattr(d, key) and value is not None:
                setattr(d, key, value)
        self.session.add(d)
        self.session.commit()
        self.session.refresh(d)
        return self._to_dto(d)

    def delete(self, doctor_id: int) -> None:
        d = self._get(doctor_id)
        if not d:
            raise NotFoundError("Doctor not found")
        self.session.delete(d)
        self.session.commit()
