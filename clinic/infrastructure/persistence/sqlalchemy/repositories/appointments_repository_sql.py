from datetime import date, datetime, time, timedelta
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....application.errors import ConflictError, NotFoundError
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    AppointmentStatus,
)
from .....db.models import Appointment


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            doctor_id=a.doctor_id,
            patient_id=a.patient_id,
            start=a.appointment_time,
            status=AppointmentStatus(a.status),
            created_at=a.created_at,
        )

    def _get(self, appointment_id: int) -> Appointment:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        if not a:
            raise NotFoundError("Appointment not found")
        return a

    def get_by_id(self, appointment_id: int) -> Optional[AppointmentDto]:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        return self._appt_to_dto(a) if a else None

    def list_for_doctor_on_date(self, doctor_id: int, day: date) -> List[AppointmentDto]:
        day_start = datetime.combine(day, time.min)
        rows = self.session.exec(
            select(Appointment)
            .where(Appointment.doctor_id == doctor_id)
            .where(Appointment.appointment_time >= day_start)
            .where(Appointment.appointment_time < day_start + timedelta(days=1))
            .order_by(Appointment.appointment_time)
        ).all()
        return [self._appt_to_dto(r) for r in rows]

    def list_for_patient(self, patient_id: int) -> List[AppointmentDto]:
        rows = self.session.exec(
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_time)
        ).all()
        return [self._appt_to_dto(r) for r in rows]

    def exists_for_doctor(self, doctor_id: int) -> bool:
        return self.session.exec(select(Appointment.id).where(Appointment.doctor_id == doctor_id)).first() is not None

    def _commit_slot(self, appt: Appointment) -> AppointmentDto:
        self.session.add(appt)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Requested slot is unavailable")
        self.session.refresh(appt)
        return self._appt_to_dto(appt)

    def create(self, doctor_id: int, patient_id: int, start: datetime) -> AppointmentDto:
        appt = Appointment(
            doctor_id=doctor_id,
            patient_id=patient_id,
            appointment_time=start,
            status=int(AppointmentStatus.SCHEDULED),
        )
        return self._commit_slot(appt)

    def update_start(self, appointment_id: int, start: datetime) -> AppointmentDto:
        a = self._get(appointment_id)
        a.appointment_time = start
        return self._commit_slot(a)

    def update_status(self, appointment_id: int, status: AppointmentStatus) -> AppointmentDto:
        a = self._get(appointment_id)
        a.status = int(status)
        self.session.add(a)
        self.session.commit()
        self.session.refresh(a)
        return self._appt_to_dto(a)

    def delete(self, appointment_id: int) -> None:
        a = self._get(appointment_id)
        self.session.delete(a)
        self.session.commit()
