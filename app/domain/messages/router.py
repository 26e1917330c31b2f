"""Message router - FastAPI endpoints for direct messaging"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ..notifications.schemas import UnreadCountResponse
from .schemas import ConversationSummary, MessageCreate, MessageResponse
from .service import MessageService

router = APIRouter(prefix="/messages", tags=["Messages"])


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    """Dependency injection for MessageService"""
    return MessageService(db)


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.send_message(data, current_user)


@router.get("/conversations", response_model=list[ConversationSummary])
async def get_conversations(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.get_conversations(current_user)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return UnreadCountResponse(count=service.unread_count(current_user))


@router.get("/conversation/{other_id}", response_model=list[MessageResponse])
async def get_conversation(
    other_id: str,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Messages between the current user and another user, newest first"""
    return service.get_conversation(current_user, other_id, limit, offset)


@router.patch("/{message_id}/read", response_model=MessageResponse)
async def mark_read(
    message_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.mark_read(message_id, current_user)
