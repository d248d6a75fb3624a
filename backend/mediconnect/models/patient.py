from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..core.db import Base


class Patient(Base):
    __tablename__ = "patients"

    # --- Primary identifiers ---
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # --- Basic details ---
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    blood_group = Column(String(10), nullable=True)

    # --- Additional health details ---
    allergies = Column(Text, nullable=True)
    medical_history = Column(Text, nullable=True)

    # --- Timestamps ---
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # --- ORM Relationships ---
    user = relationship("User", back_populates="patient", lazy="joined")
    appointments = relationship("Appointment", back_populates="patient")

    def __repr__(self):
        return (
            f"<Patient(id={self.id}, user_id={self.user_id}, "
            f"gender='{self.gender}', blood_group='{self.blood_group}')>"
        )
