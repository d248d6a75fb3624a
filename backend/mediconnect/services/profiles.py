"""Profile service - doctor/patient profiles and the public doctor directory"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from ..core.db import commit_or_500
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..schemas.profiles import DoctorProfileUpdate, PatientProfileUpdate

logger = logging.getLogger(__name__)


def _apply(obj, updates: dict):
    for key, value in updates.items():
        if hasattr(obj, key):
            setattr(obj, key, value)


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Owner-only mutations
    # ------------------------------------------------------------------
    def update_doctor(self, doctor: Doctor, data: DoctorProfileUpdate) -> Doctor:
        updates = data.model_dump(exclude_unset=True)
        if updates.get("specialization") is not None:
            updates["specialization"] = updates["specialization"].strip()
        # None on a non-nullable column means "leave as is"
        for key in ("specialization", "consultation_fee", "is_available"):
            if key in updates and updates[key] is None:
                updates.pop(key)
        _apply(doctor, updates)
        commit_or_500(self.db, "update a doctor profile")
        self.db.refresh(doctor)
        logger.info(f"🩺 Doctor profile {doctor.id} updated: {sorted(updates)}")
        return doctor

    def update_patient(self, patient: Patient, data: PatientProfileUpdate) -> Patient:
        updates = data.model_dump(exclude_unset=True)
        _apply(patient, updates)
        commit_or_500(self.db, "update a patient profile")
        self.db.refresh(patient)
        logger.info(f"🧾 Patient profile {patient.id} updated: {sorted(updates)}")
        return patient

    # ------------------------------------------------------------------
    # Directory (read-only)
    # ------------------------------------------------------------------
    def list_doctors(self, specialization: Optional[str] = None) -> list[Doctor]:
        query = self.db.query(Doctor).options(joinedload(Doctor.user))
        if specialization:
            query = query.filter(Doctor.specialization == specialization)
        return query.order_by(Doctor.id).all()

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise HTTPException(status_code=404, detail="Doctor not found")
        return doctor


def doctor_public(doctor: Doctor) -> dict:
    """Public directory row for a doctor"""
    return {
        "id": doctor.id,
        "user_id": doctor.user_id,
        "specialization": doctor.specialization,
        "bio": doctor.bio,
        "experience_years": doctor.experience_years,
        "consultation_fee": doctor.consultation_fee,
        "rating": doctor.rating,
        "is_available": doctor.is_available,
        "full_name": doctor.user.full_name if doctor.user else None,
        "wallet_address": doctor.user.wallet_address if doctor.user else "",
    }
