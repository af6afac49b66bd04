import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Enum

from app.core.db import Base
from app.schemas.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)

    role = Column(
        Enum(Role, name="role_enum"),
        nullable=False,
        default=Role.STUDENT,
    )

    image = Column(String, nullable=True)
    school = Column(String, nullable=True)

    # free-text class label, used when the student has no SchoolClass yet
    student_class = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
