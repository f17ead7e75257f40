from typing import List, Optional
from fastapi import APIRouter, Depends, Query
import logging

from ..application.ports.doctor_repo import DoctorDto
from ..application.principal import Principal
from ..application.services.access_gateway import AccessGateway
from ..application.services.doctor_service import DoctorService
from ..application.validators import parse_date
from ..dependencies import get_access_gateway, get_bearer_token, get_doctor_service, require
from ..schemas.appointments.appointment import AppointmentDetailResponse, AvailabilityResponse, SlotResponse
from ..schemas.common.common import MessageResponse
from ..schemas.doctors.doctor import DoctorCreate, DoctorResponse, DoctorUpdate
from .appointments_router import detail_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctors", tags=["Doctors"])


def doctor_response(d: DoctorDto) -> DoctorResponse:
    return DoctorResponse(
        id=d.id,
        name=d.name,
        specialty=d.specialty,
        email=d.email,
        phone=d.phone,
        working_hours={str(k): v for k, v in sorted(d.working_hours.items())},
    )


@router.get("", response_model=List[DoctorResponse])
def list_doctors(doctors: DoctorService = Depends(get_doctor_service)):
    return [doctor_response(d) for d in doctors.list_doctors()]


@router.get("/search", response_model=List[DoctorResponse])
def search_doctors(
    name: Optional[str] = Query(None),
    specialty: Optional[str] = Query(None),
    time: Optional[str] = Query(None, description="AM or PM"),
    doctors: DoctorService = Depends(get_doctor_service),
):
    return [doctor_response(d) for d in doctors.search(name, specialty, time)]


@router.get("/me/appointments", response_model=List[AppointmentDetailResponse])
def my_appointments(
    date: str = Query(..., description="YYYY-MM-DD"),
    patient_name: Optional[str] = Query(None),
    principal: Principal = Depends(require("doctor.appointments")),
    doctors: DoctorService = Depends(get_doctor_service),
):
    day = parse_date(date)
    return [detail_response(d) for d in doctors.appointments_on(int(principal.subject_id), day, patient_name)]


@router.get("/{doctor_id}", response_model=DoctorResponse)
def get_doctor(doctor_id: int, doctors: DoctorService = Depends(get_doctor_service)):
    return doctor_response(doctors.get_doctor(doctor_id))


@router.get("/{doctor_id}/availability", response_model=AvailabilityResponse)
def available_slots(
    doctor_id: int,
    date: str = Query(..., description="YYYY-MM-DD"),
    token: str = Depends(get_bearer_token),
    gateway: AccessGateway = Depends(get_access_gateway),
):
    day = parse_date(date)
    slots = gateway.available_slots(token, doctor_id, day)
    return AvailabilityResponse(
        doctor_id=doctor_id,
        date=day.strftime("%Y-%m-%d"),
        slots=[SlotResponse(start=s.start.strftime("%H:%M"), end=s.end.strftime("%H:%M")) for s in slots],
    )


@router.post("", response_model=DoctorResponse, status_code=201)
def add_doctor(
    body: DoctorCreate,
    principal: Principal = Depends(require("doctor.manage")),
    doctors: DoctorService = Depends(get_doctor_service),
):
    doctor = doctors.add_doctor(body.name, body.specialty, body.email, body.password, body.phone, body.working_hours)
    return doctor_response(doctor)


@router.put("/{doctor_id}", response_model=DoctorResponse)
def update_doctor(
    doctor_id: int,
    body: DoctorUpdate,
    principal: Principal = Depends(require("doctor.manage")),
    doctors: DoctorService = Depends(get_doctor_service),
):
    doctor = doctors.update_doctor(doctor_id, **body.model_dump(exclude_unset=True))
    return doctor_response(doctor)


@router.delete("/{doctor_id}", response_model=MessageResponse)
def delete_doctor(
    doctor_id: int,
    principal: Principal = Depends(require("doctor.manage")),
    doctors: DoctorService = Depends(get_doctor_service),
):
    doctors.delete_doctor(doctor_id)
    return MessageResponse(message="Doctor deleted successfully")
