from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth import Principal, get_current_user
from app.core.db import get_db
from app.core.permissions import require
from app.models.user import User
from app.schemas.auth import (
    AdminCreateUserRequest,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    RegisterResponse,
    UserDetail,
    UserSummary,
)
from app.schemas.enums import Action
from app.services.accounts import create_user, list_users, update_profile

router = APIRouter()


# ----------------------------
# USERS (admin only)
# ----------------------------
@router.get("/users", response_model=list[UserDetail])
def get_users(
    db: Session = Depends(get_db),
    admin: Principal = Depends(require(Action.manage_users)),
):
    return list_users(db)


@router.post("/users", response_model=RegisterResponse, status_code=201)
def post_user(
    payload: AdminCreateUserRequest,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require(Action.manage_users)),
):
    try:
        user = create_user(
            db,
            payload.name,
            payload.email,
            payload.password,
            role=payload.role,
            student_class=payload.student_class,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return RegisterResponse(message="User created successfully", user_id=user.id)


# ----------------------------
# OWN PROFILE
# ----------------------------
@router.get("/profile", response_model=UserDetail)
def get_profile(
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    row = db.get(User, user.id)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return row


@router.put("/profile", response_model=ProfileUpdateResponse)
def put_profile(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    try:
        row = update_profile(
            db,
            user.id,
            payload.name,
            payload.email,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserSummary.model_validate(row),
    )
