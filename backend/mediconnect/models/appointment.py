from sqlalchemy import (
    Column, Integer, String, Text, Numeric, DateTime, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import relationship, validates
from ..core.db import Base

# Lifecycle statuses. "completed" and "cancelled" are accepted by the schema
# but no transition produces them.
PENDING = "pending"
APPROVED = "approved"
HELD = "held"
REJECTED = "rejected"
COMPLETED = "completed"
CANCELLED = "cancelled"
APPOINTMENT_STATUSES = (PENDING, APPROVED, REJECTED, HELD, COMPLETED, CANCELLED)

# Payment statuses
PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_COMPLETED, PAYMENT_FAILED)


def _sql_in(values):
    return ", ".join(f"'{v}'" for v in values)


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint(
            f"status IN ({_sql_in(APPOINTMENT_STATUSES)})",
            name="ck_appointments_status",
        ),
        CheckConstraint(
            f"payment_status IN ({_sql_in(PAYMENT_STATUSES)})",
            name="ck_appointments_payment_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)

    # Scheduling
    appointment_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=PENDING, index=True)

    # Clinical notes from the patient
    symptoms = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    # Billing: fee is a snapshot of the doctor's fee at booking time
    consultation_fee = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(String(20), nullable=False, default=PAYMENT_PENDING)
    transaction_hash = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # ORM relations
    patient = relationship("Patient", back_populates="appointments", lazy="joined")
    doctor = relationship("Doctor", back_populates="appointments", lazy="joined")

    @validates("consultation_fee")
    def _freeze_fee(self, key, value):
        if self.consultation_fee is not None:
            raise ValueError("Consultation fee is fixed at booking time")
        return value

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, "
            f"status='{self.status}', payment='{self.payment_status}')>"
        )
