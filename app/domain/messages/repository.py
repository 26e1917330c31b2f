"""Message repository - Database operations for direct messages"""

from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models import Message, User


class MessageRepository:
    """Repository for message database operations"""

    @staticmethod
    def create(db: Session, sender_id: str, receiver_id: str, content: str) -> Message:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, read=False)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def get_by_id(db: Session, message_id: str) -> Optional[Message]:
        return db.query(Message).filter(Message.id == message_id).first()

    @staticmethod
    def get_conversation(
        db: Session, user_id: str, other_id: str, limit: int = 100, offset: int = 0
    ) -> list[Message]:
        """Messages exchanged between two users, newest first"""
        return (
            db.query(Message)
            .filter(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_id),
                    and_(Message.sender_id == other_id, Message.receiver_id == user_id),
                )
            )
            .order_by(Message.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_all_for_user(db: Session, user_id: str) -> list[Message]:
        return (
            db.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc())
            .all()
        )

    @staticmethod
    def mark_read(db: Session, message: Message) -> Message:
        message.read = True
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def unread_count(db: Session, user_id: str) -> int:
        return (
            db.query(Message)
            .filter(Message.receiver_id == user_id, Message.read.is_(False))
            .count()
        )

    @staticmethod
    def get_users(db: Session, user_ids: list[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        users = db.query(User).filter(User.id.in_(user_ids)).all()
        return {u.id: u for u in users}
