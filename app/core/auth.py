from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from fastapi import Header, HTTPException
from jose import jwt, JWTError
from loguru import logger
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.config import AUTH_SECRET, AUTH_TOKEN_TTL_MINUTES
from app.schemas.enums import Role


# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------
ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    """Identity carried by a verified bearer token."""

    id: str
    role: Role
    name: str | None = None
    email: str | None = None
    student_class: str | None = None


# ------------------------------------------------------------
# Passwords
# ------------------------------------------------------------
def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


# ------------------------------------------------------------
# Token issue
# ------------------------------------------------------------
def create_access_token(user, ttl: timedelta | None = None) -> str:
    expires_at = datetime.now(timezone.utc) + (ttl or timedelta(minutes=AUTH_TOKEN_TTL_MINUTES))
    claims = {
        "sub": user.id,
        "role": Role(user.role).value,
        "name": user.name,
        "email": user.email,
        "student_class": user.student_class,
        "exp": expires_at,
    }
    return jwt.encode(claims, AUTH_SECRET, algorithm=ALGORITHM)


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header format")

    token = parts[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    return token


def _verify_jwt_hs256(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(
            token,
            AUTH_SECRET,
            algorithms=[ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


# ------------------------------------------------------------
# Main Dependency
# ------------------------------------------------------------
def get_current_user(
    authorization: Optional[str] = Header(default=None),
) -> Principal:

    token = _get_bearer_token(authorization)
    payload = _verify_jwt_hs256(token)

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub claim")

    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise HTTPException(status_code=401, detail="Token carries an unknown role")

    logger.debug(f"[auth] user_id={sub} role={role.value}")

    return Principal(
        id=str(sub),
        role=role,
        name=payload.get("name"),
        email=payload.get("email"),
        student_class=payload.get("student_class"),
    )
