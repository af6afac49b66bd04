from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.base import BaseSchema


class LocationUpdateRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, ge=0)


class LocationLogOut(BaseSchema):
    id: int
    user_id: str
    lat: float
    lng: float
    accuracy: Optional[float] = None
    timestamp: datetime


class StatusRequest(BaseModel):
    is_sharing: bool


class StatusResponse(BaseModel):
    success: bool
    is_sharing: bool


class TrailPoint(BaseModel):
    lat: float
    lng: float
    timestamp: datetime


class PresenceEntry(BaseModel):
    """One trackable user as the map surface sees them."""

    id: str
    name: str
    lat: float
    lng: float
    timestamp: datetime
    class_name: str
    is_sharing: bool = False
    image: Optional[str] = None
    school: Optional[str] = None
    # oldest first; the last point is the current position
    history: List[TrailPoint] = []
