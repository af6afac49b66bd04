from typing import List, Optional, Union

from pydantic import BaseModel, Field

from app.schemas.base import TimestampedSchema
from app.schemas.enums import NotificationType


class BroadcastRequest(BaseModel):
    # a single id or a list of ids
    user_ids: Union[str, List[str]]
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.info

    def recipients(self) -> List[str]:
        if isinstance(self.user_ids, str):
            return [self.user_ids] if self.user_ids else []
        return [uid for uid in self.user_ids if uid]


class BroadcastResponse(BaseModel):
    success: bool
    count: int
    pushed_to: int


class NotificationOut(TimestampedSchema):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool


class PushSubscribeRequest(BaseModel):
    token: str = Field(..., min_length=1)
    platform: Optional[str] = None
