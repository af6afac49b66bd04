from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Index

from app.core.db import Base


class LocationLog(Base):
    __tablename__ = "location_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False)

    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)

    timestamp = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("idx_location_log_user_ts", "user_id", "timestamp"),
    )
