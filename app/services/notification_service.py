"""
Unified Notification Service
Persists in-app notifications for workflow events and pushes them to the
recipient's realtime feed
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Notification
from ..realtime import manager

logger = logging.getLogger(__name__)


async def publish_notification(notification: Notification) -> None:
    """Push an already persisted notification to the recipient's sockets"""
    from ..domain.notifications.schemas import NotificationResponse

    payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
    await manager.publish(notification.user_id, "notification", payload)


async def notify_user(
    db: Session,
    user_id: str,
    message: str,
    title: Optional[str] = None,
    notification_type: str = "info",
) -> Optional[Notification]:
    """
    Create a notification for a workflow event.

    The triggering action has already been committed, so a failure here is
    logged and reported as None instead of failing the request.
    """
    try:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            read=False,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Failed to create {notification_type} notification for user {user_id}: {e}")
        return None

    logger.info(f"🔔 Notification created for user {user_id}: {title or message[:40]}")
    await publish_notification(notification)
    return notification


async def send_booking_created_notification(db: Session, appointment) -> Optional[Notification]:
    """Tell the business owner about a new booking"""
    service = appointment.service
    return await notify_user(
        db,
        user_id=service.business.owner_id,
        title="New Booking",
        message=f"New booking for {service.name} on {appointment.start_time:%Y-%m-%d %H:%M}",
    )


async def send_booking_status_notification(db: Session, appointment) -> Optional[Notification]:
    """Tell the customer their booking changed status"""
    status_messages = {
        "confirmed": ("Booking Confirmed", "success"),
        "cancelled": ("Booking Cancelled", "warning"),
        "completed": ("Booking Completed", "info"),
        "no_show": ("Missed Appointment", "warning"),
        "rescheduled": ("Booking Rescheduled", "info"),
    }
    title, notification_type = status_messages.get(appointment.status, ("Booking Updated", "info"))
    return await notify_user(
        db,
        user_id=appointment.user_id,
        title=title,
        message=f"Your booking for {appointment.service.name} is now {appointment.status.replace('_', ' ')}",
        notification_type=notification_type,
    )


async def send_payment_received_notifications(db: Session, appointment, amount) -> None:
    """Confirm a completed payment to the customer and the business owner"""
    await notify_user(
        db,
        user_id=appointment.user_id,
        title="Payment Received",
        message=f"Your payment of R{amount} for {appointment.service.name} was successful",
        notification_type="success",
    )
    await notify_user(
        db,
        user_id=appointment.business.owner_id,
        title="Payment Received",
        message=f"Payment of R{amount} received for {appointment.service.name}",
        notification_type="success",
    )
