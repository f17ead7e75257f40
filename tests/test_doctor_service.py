from datetime import date, datetime

import pytest

from clinic.application.errors import ConflictError, InvalidArgumentError, NotFoundError
from clinic.application.services.doctor_service import DoctorService

MONDAY = date(2025, 3, 10)


@pytest.fixture
def service(doctors, appointments, patients, hasher, audit):
    return DoctorService(
        doctor_repo=doctors,
        appointments_repo=appointments,
        patient_repo=patients,
        hasher=hasher,
        audit=audit,
    )


def test_add_doctor_normalizes_hours(service, doctors):
    doc = service.add_doctor(
        "Dr. Grey", "Cardiology", "Grey@Clinic.test", "secret1", "0123456789",
        {"monday": ["13:00-17:00", "09:00-12:00"], "2": ["10:00-11:00", "11:00-12:00"]},
    )
    assert doc.email == "grey@clinic.test"
    assert doc.working_hours == {0: ["09:00-12:00", "13:00-17:00"], 2: ["10:00-12:00"]}
    assert doctors.get_doctor(doc.id).password_hash == "hashed:secret1"


@pytest.mark.parametrize(
    "hours",
    [{0: ["09:00-12:00", "11:00-13:00"]}, {0: ["17:00-09:00"]}, {"funday": ["09:00-10:00"]}, {9: ["09:00-10:00"]}],
)
def test_add_doctor_rejects_bad_hours(service, hours):
    with pytest.raises(InvalidArgumentError):
        service.add_doctor("Dr. Grey", "Cardiology", "grey@clinic.test", "secret1", "0123456789", hours)


def test_add_doctor_duplicate_email(service, doctors):
    doctors.add(email="grey@clinic.test")
    with pytest.raises(ConflictError):
        service.add_doctor("Dr. Grey", "Cardiology", "grey@clinic.test", "secret1", "0123456789", {})


def test_update_doctor(service, doctor):
    updated = service.update_doctor(doctor.id, specialty="Neurology", working_hours={"friday": ["08:00-12:00"]})
    assert updated.specialty == "Neurology"
    assert updated.working_hours == {4: ["08:00-12:00"]}
    with pytest.raises(NotFoundError):
        service.update_doctor(99, name="Nobody Here")


def test_update_doctor_email_taken(service, doctors, doctor):
    other = doctors.add(name="Dr. House", email="house@clinic.test")
    with pytest.raises(ConflictError):
        service.update_doctor(doctor.id, email="house@clinic.test")
    assert service.update_doctor(other.id, email="house@clinic.test").email == "house@clinic.test"


def test_delete_doctor(service, doctors, appointments, doctor):
    busy = doctors.add(name="Dr. House")
    appointments.create(busy.id, 1, datetime(2025, 3, 10, 10))
    with pytest.raises(ConflictError):
        service.delete_doctor(busy.id)

    service.delete_doctor(doctor.id)
    with pytest.raises(NotFoundError):
        service.get_doctor(doctor.id)


def test_search(service, doctors):
    doctors.add(name="Dr. Morning", specialty="Dermatology", working_hours={0: ["08:00-11:00"]})
    doctors.add(name="Dr. Evening", specialty="Dermatology", working_hours={0: ["14:00-18:00"]})
    doctors.add(name="Dr. Allday", specialty="Cardiology", working_hours={1: ["09:00-17:00"]})

    assert [d.name for d in service.search(specialty="dermatology")] == ["Dr. Evening", "Dr. Morning"]
    assert [d.name for d in service.search(time_of_day="am")] == ["Dr. Allday", "Dr. Morning"]
    assert [d.name for d in service.search(name="day", time_of_day="PM")] == ["Dr. Allday"]
    with pytest.raises(InvalidArgumentError):
        service.search(time_of_day="noon")


def test_appointments_on_day(service, appointments, patients, doctor):
    jane = patients.add(name="Jane Roe")
    john = patients.add(name="John Doe")
    appointments.create(doctor.id, john.id, datetime(2025, 3, 10, 13))
    appointments.create(doctor.id, jane.id, datetime(2025, 3, 10, 9))
    appointments.create(doctor.id, jane.id, datetime(2025, 3, 17, 9))

    day = service.appointments_on(doctor.id, MONDAY)
    assert [d.patient_name for d in day] == ["Jane Roe", "John Doe"]
    assert day[0].doctor_name == doctor.name

    assert [d.patient_name for d in service.appointments_on(doctor.id, MONDAY, patient_name="john")] == ["John Doe"]
