from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Depends, Header, HTTPException
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.user import DOCTOR, PATIENT, User

logger = logging.getLogger(__name__)

_SALT = "mediconnect-wallet-session"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.SECRET_KEY, salt=_SALT)


def issue_token(wallet_address: str) -> str:
    return _serializer().dumps({"wallet": wallet_address})


def read_token(token: str) -> Optional[str]:
    """Return the wallet address inside ``token``, or None if it is invalid or expired."""
    try:
        data = _serializer().loads(token, max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)
    except SignatureExpired:
        logger.info("🔒 Session token expired")
        return None
    except BadSignature:
        logger.warning("⚠️ Rejected session token with bad signature")
        return None
    return data.get("wallet") if isinstance(data, dict) else None


@dataclass
class Caller:
    """The authenticated user behind a request."""

    user: User
    profile: Optional[Union[Doctor, Patient]]

    @property
    def role(self) -> str:
        return self.user.user_type


def get_current_caller(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Caller:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    wallet = read_token(authorization.split(" ", 1)[1].strip())
    if not wallet:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = db.query(User).filter(User.wallet_address == wallet).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return Caller(user=user, profile=user.profile)


def require_patient(caller: Caller = Depends(get_current_caller)) -> Caller:
    if caller.role != PATIENT:
        raise HTTPException(status_code=403, detail="Only patients can perform this action")
    if caller.profile is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return caller


def require_doctor(caller: Caller = Depends(get_current_caller)) -> Caller:
    if caller.role != DOCTOR:
        raise HTTPException(status_code=403, detail="Only doctors can perform this action")
    if caller.profile is None:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return caller
