from fastapi import APIRouter, Depends

from ..application.ports.prescription_repo import PrescriptionDto
from ..application.principal import Principal
from ..application.services.prescription_service import PrescriptionService
from ..dependencies import get_prescription_service, require
from ..schemas.prescriptions.prescription import PrescriptionCreate, PrescriptionResponse

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


def prescription_response(p: PrescriptionDto) -> PrescriptionResponse:
    return PrescriptionResponse(
        id=p.id,
        appointment_id=p.appointment_id,
        patient_name=p.patient_name,
        medication=p.medication,
        dosage=p.dosage,
        doctor_notes=p.doctor_notes,
    )


@router.post("", response_model=PrescriptionResponse, status_code=201)
def save_prescription(
    body: PrescriptionCreate,
    principal: Principal = Depends(require("prescription.write")),
    prescriptions: PrescriptionService = Depends(get_prescription_service),
):
    p = prescriptions.save(body.appointment_id, body.patient_name, body.medication, body.dosage, body.doctor_notes)
    return prescription_response(p)


@router.get("/{appointment_id}", response_model=PrescriptionResponse)
def get_prescription(
    appointment_id: int,
    principal: Principal = Depends(require("prescription.read")),
    prescriptions: PrescriptionService = Depends(get_prescription_service),
):
    return prescription_response(prescriptions.get_for_appointment(appointment_id, actor=principal))
