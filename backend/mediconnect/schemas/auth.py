from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, field_validator

from ..core.wallet import normalize_address

Role = Literal["patient", "doctor"]


class WalletModel(BaseModel):
    wallet_address: str

    @field_validator("wallet_address")
    @classmethod
    def checksum_address(cls, v):
        return normalize_address(v)


class SignedRequest(WalletModel):
    role: Role
    signature: str


class LoginRequest(SignedRequest):
    pass


class RegisterRequest(SignedRequest):
    full_name: str
    email: EmailStr
    phone: str

    @field_validator("full_name", "phone")
    @classmethod
    def not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class LoginMessage(BaseModel):
    message: str


class UserResponse(BaseModel):
    id: int
    wallet_address: str
    user_type: Role
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class SessionResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
