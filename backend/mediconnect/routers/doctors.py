# mediconnect/routers/doctors.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import Caller, require_doctor
from ..schemas.profiles import DoctorProfileResponse, DoctorProfileUpdate, DoctorPublic
from ..services.profiles import ProfileService, doctor_public

router = APIRouter(prefix="/doctors", tags=["Doctors"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


# -----------------------------------------------------------------------------
# Own profile (doctor only)
# -----------------------------------------------------------------------------
@router.get("/me", response_model=DoctorProfileResponse)
def my_profile(caller: Caller = Depends(require_doctor)):
    return caller.profile


@router.put("/me", response_model=DoctorProfileResponse)
def complete_profile(
    data: DoctorProfileUpdate,
    caller: Caller = Depends(require_doctor),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_doctor(caller.profile, data)


# -----------------------------------------------------------------------------
# Public directory
# -----------------------------------------------------------------------------
@router.get("", response_model=list[DoctorPublic])
def list_doctors(
    specialization: Optional[str] = Query(None),
    service: ProfileService = Depends(get_profile_service),
):
    """All doctors, optionally restricted to one specialization (exact match)."""
    return [doctor_public(d) for d in service.list_doctors(specialization)]


@router.get("/{doctor_id}", response_model=DoctorPublic)
def get_doctor(doctor_id: int, service: ProfileService = Depends(get_profile_service)):
    return doctor_public(service.get_doctor(doctor_id))
