"""Message service - Direct messaging between customers and business owners"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Message, User
from ...realtime import manager
from ...services.notification_service import notify_user
from ...utils.sanitization import sanitize_text
from .repository import MessageRepository
from .schemas import ConversationSummary, MessageCreate, MessageResponse

logger = logging.getLogger(__name__)


class MessageService:
    """Service layer for message business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MessageRepository()

    async def send_message(self, data: MessageCreate, sender: User) -> Message:
        if data.receiverId == sender.id:
            raise HTTPException(status_code=400, detail="You cannot send a message to yourself")

        receiver = self.db.query(User).filter(User.id == data.receiverId).first()
        if not receiver:
            raise HTTPException(status_code=404, detail="Recipient not found")

        message = self.repo.create(self.db, sender.id, receiver.id, sanitize_text(data.content))
        logger.info(f"✉️ Message {message.id} sent from {sender.id} to {receiver.id}")

        payload = MessageResponse.model_validate(message).model_dump(mode="json")
        await manager.publish(receiver.id, "message", payload)

        await notify_user(
            self.db,
            user_id=receiver.id,
            title="New Message",
            message=f"You have a new message from {sender.full_name or sender.email}",
        )
        return message

    def get_conversation(self, user: User, other_id: str, limit: int = 100, offset: int = 0) -> list[Message]:
        return self.repo.get_conversation(self.db, user.id, other_id, limit, offset)

    def get_conversations(self, user: User) -> list[ConversationSummary]:
        """Latest message per counterpart, most recent conversation first"""
        latest: dict[str, Message] = {}
        unread: dict[str, int] = {}

        for message in self.repo.get_all_for_user(self.db, user.id):
            other_id = message.receiver_id if message.sender_id == user.id else message.sender_id
            latest.setdefault(other_id, message)
            if message.receiver_id == user.id and not message.read:
                unread[other_id] = unread.get(other_id, 0) + 1

        users = self.repo.get_users(self.db, list(latest))
        summaries = []
        for other_id, message in latest.items():
            other = users.get(other_id)
            summaries.append(
                ConversationSummary(
                    other_user_id=other_id,
                    other_user_name=(other.full_name or other.email) if other else None,
                    last_message=MessageResponse.model_validate(message),
                    unread_count=unread.get(other_id, 0),
                )
            )
        return summaries

    def mark_read(self, message_id: str, user: User) -> Message:
        message = self.repo.get_by_id(self.db, message_id)
        if not message:
            raise HTTPException(status_code=404, detail="Message not found")
        if message.receiver_id != user.id:
            raise HTTPException(status_code=403, detail="Only the recipient can mark a message as read")
        return self.repo.mark_read(self.db, message)

    def unread_count(self, user: User) -> int:
        return self.repo.unread_count(self.db, user.id)
