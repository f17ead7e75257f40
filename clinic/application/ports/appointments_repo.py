from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional
from datetime import datetime, date, time

from ..time_ranges import APPOINTMENT_DURATION, TimeRange


class AppointmentStatus(IntEnum):
    SCHEDULED = 0
    COMPLETED = 1


@dataclass
class AppointmentDto:
    id: int
    doctor_id: int
    patient_id: int
    start: datetime
    status: AppointmentStatus
    created_at: datetime

    @property
    def end(self) -> datetime:
        return self.start + APPOINTMENT_DURATION

    @property
    def appointment_date(self) -> date:
        return self.start.date()

    @property
    def time_of_day(self) -> time:
        return self.start.time()

    @property
    def slot(self) -> TimeRange:
        return TimeRange(self.start, self.end)


@dataclass
class AppointmentDetail:
    appointment: AppointmentDto
    doctor_name: str
    patient_name: str
    patient_email: str
    patient_phone: str


class AppointmentsRepository:
    def get_by_id(self, appointment_id: int) -> Optional[AppointmentDto]:
        ...

    def list_for_doctor_on_date(self, doctor_id: int, day: date) -> List[AppointmentDto]:
        ...

    def list_for_patient(self, patient_id: int) -> List[AppointmentDto]:
        ...

    def exists_for_doctor(self, doctor_id: int) -> bool:
        ...

    def create(self, doctor_id: int, patient_id: int, start: datetime) -> AppointmentDto:
        ...

    def update_start(self, appointment_id: int, start: datetime) -> AppointmentDto:
        ...

    def update_status(self, appointment_id: int, status: AppointmentStatus) -> AppointmentDto:
        ...

    def delete(self, appointment_id: int) -> None:
        ...
