# mediconnect/routers/patients.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import Caller, require_patient
from ..schemas.profiles import PatientProfileResponse, PatientProfileUpdate
from ..services.profiles import ProfileService

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("/me", response_model=PatientProfileResponse)
def my_profile(caller: Caller = Depends(require_patient)):
    return caller.profile


@router.put("/me", response_model=PatientProfileResponse)
def complete_profile(
    data: PatientProfileUpdate,
    caller: Caller = Depends(require_patient),
    db: Session = Depends(get_db),
):
    return ProfileService(db).update_patient(caller.profile, data)
