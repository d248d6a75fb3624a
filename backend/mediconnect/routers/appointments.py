# mediconnect/routers/appointments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import Caller, get_current_caller, require_doctor, require_patient
from ..schemas.appointment import (
    AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate, PaymentRecord,
)
from ..services.appointments import AppointmentService, appointment_view
from ..services.payments import PaymentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


# -------------------------------
# Patient: book
# -------------------------------
@router.post("", response_model=AppointmentResponse, status_code=201)
def book_appointment(
    data: AppointmentCreate,
    caller: Caller = Depends(require_patient),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.book(caller, data)
    return appointment_view(appointment, caller.role)


# -------------------------------
# Either side: dashboard listing / detail
# -------------------------------
@router.get("", response_model=list[AppointmentResponse])
def list_appointments(
    caller: Caller = Depends(get_current_caller),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Patients get newest first, doctors get soonest first."""
    return [appointment_view(a, caller.role) for a in service.list_for_caller(caller)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    caller: Caller = Depends(get_current_caller),
    service: AppointmentService = Depends(get_appointment_service),
):
    return appointment_view(service.get_for_caller(caller, appointment_id), caller.role)


# -------------------------------
# Doctor: triage
# -------------------------------
@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
def update_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    caller: Caller = Depends(require_doctor),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.change_status(caller, appointment_id, data.status)
    return appointment_view(appointment, caller.role)


# -------------------------------
# Patient: settle
# -------------------------------
@router.post("/{appointment_id}/payment", response_model=AppointmentResponse)
def record_payment(
    appointment_id: int,
    data: PaymentRecord,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    appointment = PaymentService(db).record_payment(caller, appointment_id, data.transaction_hash)
    return appointment_view(appointment, caller.role)
