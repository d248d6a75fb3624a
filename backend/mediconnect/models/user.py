from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship, validates
from ..core.db import Base

PATIENT = "patient"
DOCTOR = "doctor"
USER_TYPES = (PATIENT, DOCTOR)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("user_type IN ('patient', 'doctor')", name="ck_users_user_type"),
    )

    # --- Identity ---
    id = Column(Integer, primary_key=True, index=True)
    wallet_address = Column(String(42), unique=True, nullable=False, index=True)  # EIP-55 checksum
    user_type = Column(String(20), nullable=False)  # patient | doctor

    # --- Contact details ---
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)

    # --- Timestamps ---
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # --- 1:1 profiles (only the one matching user_type exists) ---
    doctor = relationship("Doctor", back_populates="user", uselist=False, cascade="all, delete-orphan")
    patient = relationship("Patient", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @validates("user_type")
    def _fixed_role(self, key, value):
        if value not in USER_TYPES:
            raise ValueError(f"Unknown user type: {value!r}")
        if self.user_type is not None and self.user_type != value:
            raise ValueError("User type cannot change once registered")
        return value

    @property
    def profile(self):
        return self.doctor if self.user_type == DOCTOR else self.patient

    def __repr__(self):
        return f"<User(id={self.id}, wallet='{self.wallet_address}', type='{self.user_type}')>"
