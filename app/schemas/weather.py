from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class WeatherAlertCandidate(BaseModel):
    sender_name: Optional[str] = None
    event: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    description: Optional[str] = None
    tags: List[str] = []
