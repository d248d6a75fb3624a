# mediconnect/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import Caller, get_current_caller
from ..core.wallet import login_message, normalize_address
from ..schemas.auth import (
    LoginMessage, LoginRequest, RegisterRequest, Role, SessionResponse, UserResponse,
)
from ..services.identity import IdentityService, user_dict

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_identity_service(db: Session = Depends(get_db)) -> IdentityService:
    return IdentityService(db)


@router.get("/message", response_model=LoginMessage)
def sign_in_message(wallet_address: str = Query(...), role: Role = Query(...)):
    """Text the wallet has to personal_sign for /register and /login."""
    try:
        address = normalize_address(wallet_address)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"message": login_message(role, address)}


@router.post("/register", response_model=SessionResponse, status_code=201)
def register(data: RegisterRequest, service: IdentityService = Depends(get_identity_service)):
    user = service.register(data)
    return service.session_for(user)


@router.post("/login", response_model=SessionResponse)
def login(data: LoginRequest, service: IdentityService = Depends(get_identity_service)):
    user = service.login(data)
    return service.session_for(user)


@router.get("/me", response_model=UserResponse)
def me(caller: Caller = Depends(get_current_caller)):
    return user_dict(caller.user)
