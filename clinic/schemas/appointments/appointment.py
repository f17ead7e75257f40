# clinic/schemas/appointments/appointment.py
from pydantic import BaseModel
from typing import List
from datetime import datetime


class AppointmentCreate(BaseModel):
    doctor_id: int
    patient_id: int
    appointment_time: datetime  # ISO 8601, clinic local time


class AppointmentReschedule(BaseModel):
    appointment_time: datetime


class AppointmentResponse(BaseModel):
    id: int
    doctor_id: int
    patient_id: int
    appointment_time: datetime
    end_time: datetime
    appointment_date: str  # YYYY-MM-DD
    time_of_day: str  # HH:MM
    status: str


class AppointmentDetailResponse(AppointmentResponse):
    doctor_name: str
    patient_name: str
    patient_email: str
    patient_phone: str


class SlotResponse(BaseModel):
    start: str  # HH:MM
    end: str  # HH:MM


class AvailabilityResponse(BaseModel):
    doctor_id: int
    date: str
    slots: List[SlotResponse]
