"""Notification service - Business logic for in-app notifications"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification, User
from ...services.notification_service import publish_notification
from .repository import NotificationRepository
from .schemas import NotificationCreate

logger = logging.getLogger(__name__)


class NotificationService:
    """Service layer for notification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def list_notifications(
        self, user: User, unread_only: bool = False, limit: int = 50, offset: int = 0
    ) -> list[Notification]:
        return self.repo.list_for_user(self.db, user.id, unread_only, limit, offset)

    async def create_notification(self, data: NotificationCreate) -> Notification:
        """Create a notification for any user (admin procedure)"""
        recipient = self.db.query(User).filter(User.id == data.userId).first()
        if not recipient:
            raise HTTPException(status_code=404, detail="User not found")

        notification = self.repo.create(
            self.db,
            user_id=recipient.id,
            title=data.title,
            message=data.message,
            type=data.type,
            read=False,
        )
        logger.info(f"🔔 Admin notification created for user {recipient.id}")
        await publish_notification(notification)
        return notification

    def _get_owned(self, notification_id: str, user: User) -> Notification:
        notification = self.repo.get_by_id(self.db, notification_id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        if notification.user_id != user.id:
            logger.warning(f"⚠️ User {user.id} tried to access notification {notification_id}")
            raise HTTPException(status_code=403, detail="You cannot modify this notification")
        return notification

    def mark_read(self, notification_id: str, user: User) -> Notification:
        notification = self._get_owned(notification_id, user)
        return self.repo.mark_read(self.db, notification)

    def mark_all_read(self, user: User) -> int:
        updated = self.repo.mark_all_read(self.db, user.id)
        logger.info(f"✅ Marked {updated} notifications read for user {user.id}")
        return updated

    def unread_count(self, user: User) -> int:
        return self.repo.unread_count(self.db, user.id)

    def delete_notification(self, notification_id: str, user: User) -> None:
        notification = self._get_owned(notification_id, user)
        self.repo.delete(self.db, notification)
