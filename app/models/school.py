from sqlalchemy import Column, Integer, String, ForeignKey

from app.core.db import Base


class SchoolClass(Base):
    __tablename__ = "school_class"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)


class StudentProfile(Base):
    __tablename__ = "student_profile"

    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    student_id = Column(String, unique=True, nullable=False)
    class_id = Column(Integer, ForeignKey("school_class.id"), nullable=True)
