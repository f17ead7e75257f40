from fastapi import APIRouter, Depends
import logging

from ..application.ports.appointments_repo import AppointmentDto, AppointmentDetail
from ..application.services.access_gateway import AccessGateway
from ..dependencies import get_access_gateway, get_bearer_token
from ..schemas.appointments.appointment import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
    AppointmentDetailResponse,
)
from ..schemas.common.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def appointment_response(a: AppointmentDto) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        doctor_id=a.doctor_id,
        patient_id=a.patient_id,
        appointment_time=a.start,
        end_time=a.end,
        appointment_date=a.appointment_date.strftime("%Y-%m-%d"),
        time_of_day=a.time_of_day.strftime("%H:%M"),
        status=a.status.name.lower(),
    )


def detail_response(d: AppointmentDetail) -> AppointmentDetailResponse:
    return AppointmentDetailResponse(
        **appointment_response(d.appointment).model_dump(),
        doctor_name=d.doctor_name,
        patient_name=d.patient_name,
        patient_email=d.patient_email,
        patient_phone=d.patient_phone,
    )


@router.post("", response_model=AppointmentResponse, status_code=201)
def book_appointment(
    body: AppointmentCreate,
    token: str = Depends(get_bearer_token),
    gateway: AccessGateway = Depends(get_access_gateway),
):
    appt = gateway.book_appointment(token, body.doctor_id, body.patient_id, body.appointment_time)
    return appointment_response(appt)


@router.put("/{appointment_id}/reschedule", response_model=AppointmentResponse)
def reschedule_appointment(
    appointment_id: int,
    body: AppointmentReschedule,
    token: str = Depends(get_bearer_token),
    gateway: AccessGateway = Depends(get_access_gateway),
):
    appt = gateway.reschedule_appointment(token, appointment_id, body.appointment_time)
    return appointment_response(appt)


@router.put("/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
    appointment_id: int,
    token: str = Depends(get_bearer_token),
    gateway: AccessGateway = Depends(get_access_gateway),
):
    appt = gateway.complete_appointment(token, appointment_id)
    return appointment_response(appt)


@router.delete("/{appointment_id}", response_model=MessageResponse)
def cancel_appointment(
    appointment_id: int,
    token: str = Depends(get_bearer_token),
    gateway: AccessGateway = Depends(get_access_gateway),
):
    gateway.cancel_appointment(token, appointment_id)
    return MessageResponse(message="Appointment cancelled successfully")
