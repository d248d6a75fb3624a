from sqlalchemy import (
    Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import relationship
from ..core.db import Base


class Doctor(Base):
    __tablename__ = "doctors"
    __table_args__ = (
        CheckConstraint("consultation_fee >= 0", name="ck_doctors_fee_non_negative"),
    )

    # --- Primary identifiers ---
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # --- Professional info ---
    specialization = Column(String(255), nullable=False, default="", index=True)
    bio = Column(Text, nullable=True)
    experience_years = Column(Integer, nullable=True)
    consultation_fee = Column(Numeric(10, 2), nullable=False, default=0)  # in ether
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    # --- Timestamps ---
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # --- Relationships ---
    user = relationship("User", back_populates="doctor", lazy="joined")
    appointments = relationship("Appointment", back_populates="doctor")

    def __repr__(self):
        return (
            f"<Doctor(id={self.id}, user_id={self.user_id}, "
            f"specialization='{self.specialization}', fee={self.consultation_fee})>"
        )
