import uuid

from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import hash_password, verify_password
from app.core.tracking_config import MIN_PASSWORD_LENGTH
from app.models.school import StudentProfile
from app.models.user import User
from app.schemas.enums import Role


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_student_id() -> str:
    return f"STU{uuid.uuid4().hex[:8].upper()}"


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


# ---------- ACCOUNTS ----------

def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Role = Role.STUDENT,
    student_class: str | None = None,
) -> User:
    _check_password(password)

    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise ValueError("User with this email already exists")

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
        student_class=student_class if role == Role.STUDENT else None,
    )
    db.add(user)
    db.flush()

    if role == Role.STUDENT:
        db.add(StudentProfile(user_id=user.id, student_id=generate_student_id()))

    db.commit()
    db.refresh(user)

    logger.info(f"User created | user={user.id} role={role.value}")
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user:
        logger.info(f"Login failed, unknown email | email={email}")
        return None

    if not verify_password(password, user.password_hash):
        logger.info(f"Login failed, bad password | user={user.id}")
        return None

    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


# ---------- OWN PROFILE ----------

def update_profile(
    db: Session,
    user_id: str,
    name: str,
    email: str,
    current_password: str | None = None,
    new_password: str | None = None,
) -> User:
    user = db.get(User, user_id)
    if not user:
        raise LookupError("User not found")

    email = normalize_email(email)
    if email != user.email:
        if db.query(User).filter(User.email == email).first():
            raise ValueError("Email is already taken")

    if new_password:
        if not current_password:
            raise ValueError("Current password is required to change password")
        _check_password(new_password)
        if not verify_password(current_password, user.password_hash):
            raise ValueError("Current password is incorrect")
        user.password_hash = hash_password(new_password)

    user.name = name.strip()
    user.email = email
    db.commit()
    db.refresh(user)

    logger.info(f"Profile updated | user={user.id}")
    return user
