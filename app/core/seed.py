from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import hash_password
from app.models.school import SchoolClass, StudentProfile
from app.models.user import User
from app.schemas.enums import Role

DEMO_PASSWORD = "password123"

DEMO_CLASSES = [
    ("Grade 10 - Science", "Science stream students"),
    ("Grade 10 - Arts", "Arts stream students"),
]


def _upsert_class(db: Session, name: str, description: str) -> SchoolClass:
    row = db.query(SchoolClass).filter(SchoolClass.name == name).first()
    if not row:
        row = SchoolClass(name=name, description=description)
        db.add(row)
        db.flush()
    return row


def _upsert_user(db: Session, email: str, name: str, role: Role) -> User:
    row = db.query(User).filter(User.email == email).first()
    if not row:
        row = User(email=email, name=name, role=role, password_hash=hash_password(DEMO_PASSWORD))
        db.add(row)
        db.flush()
    return row


def seed_demo_data(db: Session) -> None:
    """Idempotent: running twice leaves one copy of everything."""
    classes = [_upsert_class(db, name, desc) for name, desc in DEMO_CLASSES]

    _upsert_user(db, "admin@tracking.com", "Admin User", Role.ADMIN)
    student = _upsert_user(db, "student@tracking.com", "John Doe", Role.STUDENT)

    if not db.get(StudentProfile, student.id):
        db.add(StudentProfile(user_id=student.id, student_id="STU001", class_id=classes[0].id))

    db.commit()
    logger.info("Seed data created successfully")


if __name__ == "__main__":
    from app.core.db import session_scope
    from app.core.init_db import init_db
    from app.core.logging import setup_logging

    setup_logging()
    init_db()
    with session_scope() as session:
        seed_demo_data(session)
