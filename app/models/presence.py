from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from app.core.db import Base

class Presence(Base):
    __tablename__ = "presence"

    user_id = Column(String(36), primary_key=True, index=True)

    # explicit opt-in; not derived from sample cadence
    is_sharing = Column(Boolean, nullable=False, default=False)

    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
