import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, Enum, Text

from app.core.db import Base
from app.schemas.enums import NotificationType


class Notification(Base):
    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), index=True, nullable=False)

    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(
        Enum(NotificationType, name="notification_type_enum"),
        nullable=False,
        default=NotificationType.info,
    )
    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
