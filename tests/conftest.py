import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "10000")

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from clinic.application.errors import NotFoundError
from clinic.application.ports.admin_repo import AdminDto
from clinic.application.ports.appointments_repo import AppointmentDto, AppointmentStatus
from clinic.application.ports.doctor_repo import DoctorDto
from clinic.application.ports.patient_repo import PatientDto
from clinic.application.ports.prescription_repo import PrescriptionDto
from clinic.application.services.access_gateway import AccessGateway
from clinic.application.services.availability_service import AvailabilityService
from clinic.application.services.scheduling_service import SchedulingService
from clinic.application.services.token_service import TokenService
from clinic.infrastructure.locks.memory_slot_locks import InMemorySlotLocks

SECRET = "unit-test-secret-key-with-enough-length"

# Sunday morning; 2025-03-10 is the Monday after
NOW = datetime(2025, 3, 9, 8, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)


class FakeDoctorRepo:
    def __init__(self):
        self.doctors: Dict[int, DoctorDto] = {}
        self._id = 1

    def add(self, name="Dr. Grey", specialty="Cardiology", email=None, working_hours=None, password_hash="hashed:secret1"):
        return self.create(name, specialty, email or f"doc{self._id}@clinic.test", "0123456789", password_hash, working_hours or {})

    def get_doctor(self, doctor_id: int) -> Optional[DoctorDto]:
        return self.doctors.get(doctor_id)

    def get_by_email(self, email: str) -> Optional[DoctorDto]:
        return next((d for d in self.doctors.values() if d.email == email), None)

    def list_all(self) -> List[DoctorDto]:
        return sorted(self.doctors.values(), key=lambda d: d.name)

    def search(self, name, specialty):
        out = self.list_all()
        if name:
            out = [d for d in out if name.lower() in d.name.lower()]
        if specialty:
            out = [d for d in out if d.specialty.lower() == specialty.lower()]
        return out

    def create(self, name, specialty, email, phone, password_hash, working_hours):
        d = DoctorDto(self._id, name, specialty, email, phone, dict(working_hours), password_hash)
        self.doctors[d.id] = d
        self._id += 1
        return d

    def update(self, doctor_id, fields):
        d = self.doctors.get(doctor_id)
        if not d:
            raise NotFoundError("Doctor not found")
        for key, value in fields.items():
            setattr(d, key, value)
        return d

    def delete(self, doctor_id):
        if doctor_id not in self.doctors:
            raise NotFoundError("Doctor not found")
        del self.doctors[doctor_id]


class FakePatientRepo:
    def __init__(self):
        self.patients: Dict[int, PatientDto] = {}
        self._id = 1

    def add(self, name="Jane Roe", email=None, phone=None, password_hash="hashed:secret1"):
        n = self._id
        return self.create(name, email or f"patient{n}@mail.test", phone or f"55500000{n:02d}", "1 Main St", password_hash)

    def get_patient(self, patient_id):
        return self.patients.get(patient_id)

    def get_by_email(self, email):
        return next((p for p in self.patients.values() if p.email == email), None)

    def get_by_phone(self, phone):
        return next((p for p in self.patients.values() if p.phone == phone), None)

    def create(self, name, email, phone, address, password_hash):
        p = PatientDto(self._id, name, email, phone, address, password_hash)
        self.patients[p.id] = p
        self._id += 1
        return p


class FakeAdminRepo:
    def __init__(self):
        self.admins = {"root": AdminDto(id=1, username="root", password_hash="hashed:rootpass")}

    def get_by_username(self, username):
        return self.admins.get(username)


class FakeApptRepo:
    def __init__(self):
        self._id = 1
        self.appts: Dict[int, AppointmentDto] = {}
        # widens the read-then-write window in concurrency tests
        self.read_delay = 0.0

    def get_by_id(self, appointment_id):
        return self.appts.get(appointment_id)

    def list_for_doctor_on_date(self, doctor_id, day):
        rows = [a for a in self.appts.values() if a.doctor_id == doctor_id and a.start.date() == day]
        if self.read_delay:
            time.sleep(self.read_delay)
        return sorted(rows, key=lambda a: a.start)

    def list_for_patient(self, patient_id):
        return sorted((a for a in self.appts.values() if a.patient_id == patient_id), key=lambda a: a.start)

    def exists_for_doctor(self, doctor_id):
        return any(a.doctor_id == doctor_id for a in self.appts.values())

    def create(self, doctor_id, patient_id, start):
        a = AppointmentDto(self._id, doctor_id, patient_id, start, AppointmentStatus.SCHEDULED, datetime.utcnow())
        self.appts[a.id] = a
        self._id += 1
        return a

    def update_start(self, appointment_id, start):
        a = self.appts.get(appointment_id)
        if not a:
            raise NotFoundError("Appointment not found")
        a.start = start
        return a

    def update_status(self, appointment_id, status):
        a = self.appts.get(appointment_id)
        if not a:
            raise NotFoundError("Appointment not found")
        a.status = status
        return a

    def delete(self, appointment_id):
        if appointment_id not in self.appts:
            raise NotFoundError("Appointment not found")
        del self.appts[appointment_id]


class FakePrescriptionRepo:
    def __init__(self):
        self.items: Dict[int, PrescriptionDto] = {}

    def create(self, appointment_id, patient_name, medication, dosage, doctor_notes):
        p = PrescriptionDto(len(self.items) + 1, appointment_id, patient_name, medication, dosage, doctor_notes)
        self.items[appointment_id] = p
        return p

    def get_by_appointment(self, appointment_id):
        return self.items.get(appointment_id)


class FakeHasher:
    def hash(self, password):
        return f"hashed:{password}"

    def verify(self, password, password_hash):
        return password_hash == f"hashed:{password}"


class RecordingAudit:
    def __init__(self):
        self.entries = []
        self._lock = threading.Lock()

    def log(self, action, subject_id=None, role=None, success=True, details=None):
        with self._lock:
            self.entries.append((action, subject_id, role, success, details or {}))


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def token_clock():
    return FakeClock(datetime(2025, 3, 9, 7, 0, tzinfo=timezone.utc))


@pytest.fixture
def doctors():
    return FakeDoctorRepo()


@pytest.fixture
def patients():
    return FakePatientRepo()


@pytest.fixture
def appointments():
    return FakeApptRepo()


@pytest.fixture
def audit():
    return RecordingAudit()


@pytest.fixture
def doctor(doctors):
    # Monday 09:00-17:00 only
    return doctors.add(working_hours={0: ["09:00-17:00"]})


@pytest.fixture
def availability(doctors, appointments, clock):
    return AvailabilityService(doctor_repo=doctors, appointments_repo=appointments, now=clock)


@pytest.fixture
def scheduling(doctors, patients, appointments, availability, audit, clock):
    return SchedulingService(
        appointments_repo=appointments,
        doctor_repo=doctors,
        patient_repo=patients,
        availability=availability,
        locks=InMemorySlotLocks(),
        audit=audit,
        now=clock,
    )


@pytest.fixture
def tokens(token_clock):
    return TokenService(secret_key=SECRET, expire_minutes=60, clock=token_clock)


@pytest.fixture
def gateway(tokens, scheduling, availability, audit):
    return AccessGateway(tokens=tokens, scheduling=scheduling, availability=availability, audit=audit)


@pytest.fixture
def hasher():
    return FakeHasher()


@pytest.fixture
def admins():
    return FakeAdminRepo()


@pytest.fixture
def prescriptions():
    return FakePrescriptionRepo()
