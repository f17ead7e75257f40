import threading
from datetime import date, datetime

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from clinic.application.errors import ConflictError, NotFoundError
from clinic.application.ports.appointments_repo import AppointmentStatus
from clinic.application.services.availability_service import AvailabilityService
from clinic.application.services.scheduling_service import SchedulingService
from clinic.db import models  # noqa: F401
from clinic.infrastructure.locks.memory_slot_locks import InMemorySlotLocks
from clinic.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdminRepository
from clinic.infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from clinic.infrastructure.persistence.sqlalchemy.repositories.doctor_repository_sql import SqlDoctorRepository
from clinic.infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository
from clinic.infrastructure.persistence.sqlalchemy.repositories.prescription_repository_sql import SqlPrescriptionRepository


@pytest.fixture
def session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture
def doctor(session):
    return SqlDoctorRepository(session).create(
        "Dr. Grey", "Cardiology", "grey@clinic.test", "0123456789", "hash", {0: ["09:00-17:00"], 2: ["10:00-12:00"]}
    )


@pytest.fixture
def patient(session):
    return SqlPatientRepository(session).create("Jane Roe", "jane@mail.test", "5550001111", "1 Main St", "hash")


def test_doctor_working_hours_roundtrip(session, doctor):
    repo = SqlDoctorRepository(session)
    loaded = repo.get_doctor(doctor.id)
    assert loaded.working_hours == {0: ["09:00-17:00"], 2: ["10:00-12:00"]}
    assert repo.get_by_email("grey@clinic.test").id == doctor.id


def test_doctor_search_and_update(session, doctor):
    repo = SqlDoctorRepository(session)
    repo.create("Dr. House", "Diagnostics", "house@clinic.test", "0123456789", "hash", {})
    assert [d.name for d in repo.search("gre", None)] == ["Dr. Grey"]
    assert [d.name for d in repo.search(None, "diagnostics")] == ["Dr. House"]
    assert [d.name for d in repo.list_all()] == ["Dr. Grey", "Dr. House"]

    updated = repo.update(doctor.id, {"specialty": "Neurology", "working_hours": {4: ["08:00-12:00"]}})
    assert updated.specialty == "Neurology"
    assert updated.working_hours == {4: ["08:00-12:00"]}

    repo.delete(doctor.id)
    assert repo.get_doctor(doctor.id) is None
    with pytest.raises(NotFoundError):
        repo.delete(doctor.id)


def test_patient_lookups(session, patient):
    repo = SqlPatientRepository(session)
    assert repo.get_patient(patient.id).name == "Jane Roe"
    assert repo.get_by_email("jane@mail.test").id == patient.id
    assert repo.get_by_phone("5550001111").id == patient.id
    assert repo.get_by_email("nobody@mail.test") is None


def test_appointments_by_day_and_patient(session, doctor, patient):
    repo = SqlAppointmentsRepository(session)
    late = repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 15))
    early = repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 9))
    repo.create(doctor.id, patient.id, datetime(2025, 3, 11, 0))

    day = repo.list_for_doctor_on_date(doctor.id, date(2025, 3, 10))
    assert [a.id for a in day] == [early.id, late.id]
    assert day[0].status == AppointmentStatus.SCHEDULED
    assert len(repo.list_for_patient(patient.id)) == 3
    assert repo.exists_for_doctor(doctor.id)


def test_appointment_updates_and_delete(session, doctor, patient):
    repo = SqlAppointmentsRepository(session)
    appt = repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 10))

    moved = repo.update_start(appt.id, datetime(2025, 3, 10, 12))
    assert moved.start == datetime(2025, 3, 10, 12)
    done = repo.update_status(appt.id, AppointmentStatus.COMPLETED)
    assert done.status == AppointmentStatus.COMPLETED

    repo.delete(appt.id)
    assert repo.get_by_id(appt.id) is None
    with pytest.raises(NotFoundError):
        repo.update_status(appt.id, AppointmentStatus.COMPLETED)
    with pytest.raises(NotFoundError):
        repo.delete(appt.id)


def test_admin_ensure_is_idempotent(session):
    repo = SqlAdminRepository(session)
    first = repo.ensure("root", "hash")
    again = repo.ensure("root", "other-hash")
    assert first.id == again.id
    assert repo.get_by_username("root").password_hash == "hash"


def test_prescriptions(session):
    repo = SqlPrescriptionRepository(session)
    saved = repo.create(7, "Jane Roe", "Amoxicillin", "500mg", None)
    assert repo.get_by_appointment(7).id == saved.id
    assert repo.get_by_appointment(8) is None


def test_appointment_times_stay_naive(session, doctor, patient):
    repo = SqlAppointmentsRepository(session)
    appt = repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 10))
    loaded = repo.get_by_id(appt.id)
    assert loaded.start == datetime(2025, 3, 10, 10)
    assert loaded.start.tzinfo is None
    assert loaded.created_at.tzinfo is None


def test_duplicate_start_is_a_conflict(session, doctor, patient):
    repo = SqlAppointmentsRepository(session)
    first = repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 10))
    other = repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 12))
    with pytest.raises(ConflictError):
        repo.create(doctor.id, patient.id, datetime(2025, 3, 10, 10))
    with pytest.raises(ConflictError):
        repo.update_start(other.id, datetime(2025, 3, 10, 10))
    assert repo.get_by_id(other.id).start == datetime(2025, 3, 10, 12)
    assert [a.id for a in repo.list_for_doctor_on_date(doctor.id, date(2025, 3, 10))] == [first.id, other.id]


def test_concurrent_bookings_with_separate_sessions(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'clinic.db'}", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    n = 8
    with Session(engine) as s:
        doc = SqlDoctorRepository(s).create("Dr. Grey", "Cardiology", "grey@clinic.test", "0123456789", "hash", {0: ["09:00-17:00"]})
        patient_ids = [
            SqlPatientRepository(s).create(f"Patient {i}", f"p{i}@mail.test", f"55500000{i:02d}", "1 Main St", "hash").id
            for i in range(n)
        ]

    locks = InMemorySlotLocks()
    barrier = threading.Barrier(n)
    results = []
    guard = threading.Lock()

    def book(i):
        with Session(engine) as s:
            appointments = SqlAppointmentsRepository(s)
            doctors = SqlDoctorRepository(s)
            scheduling = SchedulingService(
                appointments_repo=appointments,
                doctor_repo=doctors,
                patient_repo=SqlPatientRepository(s),
                availability=AvailabilityService(doctor_repo=doctors, appointments_repo=appointments, now=lambda: datetime(2025, 3, 9, 8)),
                locks=locks,
                now=lambda: datetime(2025, 3, 9, 8),
            )
            barrier.wait()
            try:
                scheduling.book_appointment(doc.id, patient_ids[i], datetime(2025, 3, 10, 10, 5 * i))
                outcome = "ok"
            except ConflictError:
                outcome = "conflict"
        with guard:
            results.append(outcome)

    threads = [threading.Thread(target=book, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["conflict"] * (n - 1) + ["ok"]
    with Session(engine) as s:
        assert len(SqlAppointmentsRepository(s).list_for_doctor_on_date(doc.id, date(2025, 3, 10))) == 1
    engine.dispose()
