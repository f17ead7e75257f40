from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from ..application.principal import Principal
from ..application.services.patient_service import PatientService
from ..dependencies import get_patient_service, require
from ..schemas.appointments.appointment import AppointmentDetailResponse
from ..schemas.patients.patient import PatientResponse
from .appointments_router import detail_response

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("/me", response_model=PatientResponse)
def get_me(
    principal: Principal = Depends(require("patient.profile")),
    patients: PatientService = Depends(get_patient_service),
):
    p = patients.get_patient(int(principal.subject_id))
    return PatientResponse(id=p.id, name=p.name, email=p.email, phone=p.phone, address=p.address)


@router.get("/me/appointments", response_model=List[AppointmentDetailResponse])
def my_appointments(
    condition: Optional[str] = Query(None, description="past or future"),
    doctor_name: Optional[str] = Query(None),
    principal: Principal = Depends(require("patient.profile")),
    patients: PatientService = Depends(get_patient_service),
):
    details = patients.appointments(int(principal.subject_id), condition, doctor_name)
    return [detail_response(d) for d in details]
