from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

# Anything a doctor may ask for; the lifecycle decides which edges are legal.
StatusValue = Literal["pending", "approved", "rejected", "held", "completed", "cancelled"]


class AppointmentCreate(BaseModel):
    doctor_id: int
    appointment_date: datetime
    symptoms: Optional[str] = None
    description: Optional[str] = None

    @field_validator("appointment_date")
    @classmethod
    def naive_utc(cls, v):
        # stored as a naive UTC timestamp
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class AppointmentStatusUpdate(BaseModel):
    status: StatusValue


class PaymentRecord(BaseModel):
    transaction_hash: str = Field(..., min_length=1, max_length=255)

    @field_validator("transaction_hash")
    @classmethod
    def strip_hash(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class DoctorSummary(BaseModel):
    specialization: str
    full_name: Optional[str] = None
    wallet_address: str


class PatientSummary(BaseModel):
    full_name: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    appointment_date: datetime
    status: str
    symptoms: Optional[str] = None
    description: Optional[str] = None
    consultation_fee: Decimal
    payment_status: str
    transaction_hash: Optional[str] = None
    doctor: Optional[DoctorSummary] = None
    patient: Optional[PatientSummary] = None
