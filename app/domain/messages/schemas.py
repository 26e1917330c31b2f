"""Message domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...utils.sanitization import CONTROL_CHARS


class MessageCreate(BaseModel):
    receiverId: str
    content: str = Field(min_length=1, max_length=1000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not CONTROL_CHARS.sub("", v).strip():
            raise ValueError("Message cannot be empty")
        return v


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sender_id: str
    receiver_id: str
    content: str
    read: bool
    created_at: Optional[datetime] = None


class ConversationSummary(BaseModel):
    other_user_id: str
    other_user_name: Optional[str] = None
    last_message: MessageResponse
    unread_count: int
