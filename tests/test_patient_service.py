from datetime import datetime

import pytest

from clinic.application.errors import InvalidArgumentError, NotFoundError
from clinic.application.services.patient_service import PatientService


@pytest.fixture
def service(patients, appointments, doctors, clock):
    return PatientService(patient_repo=patients, appointments_repo=appointments, doctor_repo=doctors, now=clock)


@pytest.fixture
def history(patients, appointments, doctors):
    jane = patients.add(name="Jane Roe")
    grey = doctors.add(name="Dr. Grey")
    house = doctors.add(name="Dr. House")
    appointments.create(grey.id, jane.id, datetime(2025, 3, 1, 10))
    appointments.create(house.id, jane.id, datetime(2025, 3, 12, 15))
    appointments.create(grey.id, jane.id, datetime(2025, 3, 10, 9))
    return jane


def test_all_appointments_in_order(service, history):
    rows = service.appointments(history.id)
    assert [r.appointment.start.day for r in rows] == [1, 10, 12]
    assert rows[0].patient_email == history.email


def test_past_and_future(service, history):
    assert [r.appointment.start.day for r in service.appointments(history.id, condition="past")] == [1]
    assert [r.appointment.start.day for r in service.appointments(history.id, condition="future")] == [10, 12]


def test_filter_by_doctor_name(service, history):
    rows = service.appointments(history.id, doctor_name="HOUSE")
    assert [r.doctor_name for r in rows] == ["Dr. House"]


def test_bad_condition(service, history):
    with pytest.raises(InvalidArgumentError):
        service.appointments(history.id, condition="soon")


def test_unknown_patient(service):
    with pytest.raises(NotFoundError):
        service.get_patient(5)
    with pytest.raises(NotFoundError):
        service.appointments(5)
