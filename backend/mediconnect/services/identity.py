"""Identity service - wallet address to user/role resolution and registration"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.db import commit_or_500
from ..core.security import issue_token
from ..core.wallet import login_message, verify_signature
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.user import DOCTOR, User
from ..schemas.auth import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class IdentityService:
    """Service layer for wallet identities"""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, wallet_address: str) -> Optional[User]:
        """Return the user registered under ``wallet_address`` (checksum form), if any"""
        return self.db.query(User).filter(User.wallet_address == wallet_address).first()

    def _check_signature(self, role: str, wallet_address: str, signature: str):
        if not verify_signature(login_message(role, wallet_address), signature, wallet_address):
            logger.warning(f"⚠️ Signature mismatch for {wallet_address}")
            raise HTTPException(status_code=401, detail="Invalid wallet signature")

    def register(self, data: RegisterRequest) -> User:
        """Create the user and its empty profile. One registration per address."""
        self._check_signature(data.role, data.wallet_address, data.signature)

        if self.resolve(data.wallet_address):
            raise HTTPException(status_code=409, detail="Wallet already registered")

        user = User(
            wallet_address=data.wallet_address,
            user_type=data.role,
            full_name=data.full_name,
            email=str(data.email),
            phone=data.phone,
        )
        if data.role == DOCTOR:
            user.doctor = Doctor(specialization="", consultation_fee=0, is_available=True)
        else:
            user.patient = Patient()
        self.db.add(user)

        try:
            commit_or_500(self.db, "register a user")
        except IntegrityError:
            # lost a race against a concurrent registration of the same address
            raise HTTPException(status_code=409, detail="Wallet already registered")
        self.db.refresh(user)
        logger.info(f"✅ Registered {data.role} {user.wallet_address} (user_id={user.id})")
        return user

    def login(self, data: LoginRequest) -> User:
        self._check_signature(data.role, data.wallet_address, data.signature)

        user = self.resolve(data.wallet_address)
        if not user:
            raise HTTPException(status_code=404, detail="Account not found. Please register first.")
        if user.user_type != data.role:
            raise HTTPException(status_code=403, detail=f"Wallet is registered as a {user.user_type}")
        logger.info(f"🔑 {user.user_type} {user.wallet_address} signed in")
        return user

    @staticmethod
    def session_for(user: User) -> dict:
        return {"token": issue_token(user.wallet_address), "token_type": "bearer", "user": user_dict(user)}


def user_dict(user: User) -> dict:
    return {
        "id": user.id,
        "wallet_address": user.wallet_address,
        "user_type": user.user_type,
        "full_name": user.full_name,
        "email": user.email,
        "phone": user.phone,
    }
