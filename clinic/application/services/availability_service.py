from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional

from ..errors import InvalidArgumentError, NotFoundError
from ..ports.appointments_repo import AppointmentsRepository
from ..ports.doctor_repo import DoctorRepository, DoctorDto
from ..time_ranges import TimeRange, subtract, working_windows


@dataclass
class AvailabilityService:
    doctor_repo: DoctorRepository
    appointments_repo: AppointmentsRepository
    now: Callable[[], datetime] = datetime.now

    def available_slots(self, doctor_id: int, day: date, exclude_appointment_id: Optional[int] = None) -> List[TimeRange]:
        """Free ranges of a doctor's working day, earliest first.

        Every appointment of the doctor on ``day`` occupies one hour from its
        start, except ``exclude_appointment_id`` which is treated as free
        (an appointment being moved does not block itself).
        """
        if day < self.now().date():
            raise InvalidArgumentError("Date cannot be in the past")
        doctor = self.doctor_repo.get_doctor(doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return self.free_ranges(doctor, day, exclude_appointment_id)

    def free_ranges(self, doctor: DoctorDto, day: date, exclude_appointment_id: Optional[int] = None) -> List[TimeRange]:
        windows = working_windows(doctor.working_hours, day)
        if not windows:
            return []
        busy = [
            a.slot
            for a in self.appointments_repo.list_for_doctor_on_date(doctor.id, day)
            if a.id != exclude_appointment_id
        ]
        return subtract(windows, busy)

    def is_free(self, doctor: DoctorDto, slot: TimeRange, exclude_appointment_id: Optional[int] = None) -> bool:
        return any(r.contains(slot) for r in self.free_ranges(doctor, slot.start.date(), exclude_appointment_id))
