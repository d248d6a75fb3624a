"""Appointment service - booking, triage and role-dependent listings"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..core.db import commit_or_500
from ..core.security import Caller
from ..models.appointment import PAYMENT_PENDING, PENDING, Appointment
from ..models.doctor import Doctor
from ..models.user import DOCTOR, PATIENT
from ..schemas.appointment import AppointmentCreate
from .lifecycle import InvalidTransition, check_transition

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for the appointment lifecycle"""

    def __init__(self, db: Session):
        self.db = db

    def book(self, caller: Caller, data: AppointmentCreate) -> Appointment:
        """Create a pending appointment for the calling patient.

        The consultation fee is copied from the doctor's profile; later fee
        changes never reach an existing booking.
        """
        if caller.role != PATIENT:
            raise HTTPException(status_code=403, detail="Only patients can book appointments")

        doctor = self.db.query(Doctor).filter(Doctor.id == data.doctor_id).first()
        if not doctor:
            raise HTTPException(status_code=404, detail="Doctor not found")
        # stricter than a plain directory listing: unavailable doctors take no new bookings
        if not doctor.is_available:
            raise HTTPException(status_code=409, detail="Doctor is not accepting appointments")

        appointment = Appointment(
            patient_id=caller.profile.id,
            doctor_id=doctor.id,
            appointment_date=data.appointment_date,
            symptoms=data.symptoms,
            description=data.description,
            consultation_fee=doctor.consultation_fee,
            status=PENDING,
            payment_status=PAYMENT_PENDING,
        )
        self.db.add(appointment)
        commit_or_500(self.db, "create an appointment")
        self.db.refresh(appointment)
        logger.info(
            f"📅 Appointment {appointment.id} booked: patient={appointment.patient_id} "
            f"doctor={appointment.doctor_id} fee={appointment.consultation_fee}"
        )
        return appointment

    def get_for_caller(self, caller: Caller, appointment_id: int) -> Appointment:
        """Fetch an appointment the caller takes part in; 404 for everyone else."""
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        owner_id = None
        if appointment is not None:
            owner_id = appointment.doctor_id if caller.role == DOCTOR else appointment.patient_id
        if appointment is None or caller.profile is None or owner_id != caller.profile.id:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def list_for_caller(self, caller: Caller) -> list[Appointment]:
        if caller.profile is None:
            return []
        query = self.db.query(Appointment)
        if caller.role == PATIENT:
            return (
                query.filter(Appointment.patient_id == caller.profile.id)
                .order_by(Appointment.appointment_date.desc(), Appointment.id.desc())
                .all()
            )
        return (
            query.filter(Appointment.doctor_id == caller.profile.id)
            .order_by(Appointment.appointment_date.asc(), Appointment.id.asc())
            .all()
        )

    def change_status(self, caller: Caller, appointment_id: int, new_status: str) -> Appointment:
        """Move an appointment along a legal edge. Only its own doctor may do so."""
        if caller.role != DOCTOR:
            raise HTTPException(status_code=403, detail="Only doctors can update appointment status")

        appointment = self.get_for_caller(caller, appointment_id)
        try:
            check_transition(appointment.status, new_status)
        except InvalidTransition as e:
            logger.warning(f"⚠️ Appointment {appointment.id}: {e}")
            raise HTTPException(status_code=409, detail=str(e)) from e

        previous = appointment.status
        appointment.status = new_status
        commit_or_500(self.db, "update appointment status")
        self.db.refresh(appointment)
        logger.info(f"🩺 Appointment {appointment.id}: {previous} → {new_status}")
        return appointment


def appointment_view(appointment: Appointment, role: str) -> dict:
    """Serialize an appointment with the counterparty's public fields."""
    row = {
        "id": appointment.id,
        "patient_id": appointment.patient_id,
        "doctor_id": appointment.doctor_id,
        "appointment_date": appointment.appointment_date,
        "status": appointment.status,
        "symptoms": appointment.symptoms,
        "description": appointment.description,
        "consultation_fee": appointment.consultation_fee,
        "payment_status": appointment.payment_status,
        "transaction_hash": appointment.transaction_hash,
        "doctor": None,
        "patient": None,
    }
    if role == PATIENT:
        doctor = appointment.doctor
        row["doctor"] = {
            "specialization": doctor.specialization,
            "full_name": doctor.user.full_name,
            "wallet_address": doctor.user.wallet_address,
        }
    else:
        patient = appointment.patient
        row["patient"] = {
            "full_name": patient.user.full_name,
            "gender": patient.gender,
            "blood_group": patient.blood_group,
        }
    return row
