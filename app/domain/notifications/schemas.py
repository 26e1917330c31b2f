"""Notification domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NotificationType = Literal["info", "success", "warning", "error"]


class NotificationCreate(BaseModel):
    userId: str
    message: str = Field(min_length=1, max_length=1000)
    title: Optional[str] = Field(default=None, max_length=255)
    type: NotificationType = "info"


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: Optional[str] = None
    message: str
    type: str
    read: bool
    created_at: Optional[datetime] = None


class UnreadCountResponse(BaseModel):
    count: int
