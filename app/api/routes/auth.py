from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import create_access_token
from app.core.db import get_db
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)
from app.schemas.enums import Role
from app.services.accounts import authenticate, create_user

router = APIRouter()


# ----------------------------
# REGISTER (self-service, students only)
# ----------------------------
@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
):
    try:
        user = create_user(db, payload.name, payload.email, payload.password, role=Role.STUDENT)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return RegisterResponse(message="User registered successfully", user_id=user.id)


# ----------------------------
# LOGIN
# ----------------------------
@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
):
    user = authenticate(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info(f"Login | user={user.id} role={user.role.value}")
    return LoginResponse(
        access_token=create_access_token(user),
        user=UserSummary.model_validate(user),
    )
