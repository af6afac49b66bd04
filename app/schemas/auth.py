from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.tracking_config import MIN_PASSWORD_LENGTH
from app.schemas.base import BaseSchema
from app.schemas.enums import Role


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str


class RegisterResponse(BaseModel):
    message: str
    user_id: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserSummary(BaseSchema):
    id: str
    name: Optional[str] = None
    email: str
    role: Role
    student_class: Optional[str] = None


class UserDetail(UserSummary):
    image: Optional[str] = None
    school: Optional[str] = None
    created_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary


class AdminCreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str
    role: Role
    student_class: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH)


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserSummary
