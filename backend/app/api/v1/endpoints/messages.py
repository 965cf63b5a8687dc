from typing import List

from fastapi import Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_AUTH_400_404, RESP_AUTH_404
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.auth import MessageResponse as AckResponse
from app.schemas.message import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
)
from app.schemas.notification import UnreadCountResponse
from app.services.messaging import MessagingService

router = CustomAPIRouter()


@router.post("/", response_model=ConversationResponse, responses={**RESP_AUTH_400_404})
async def open_conversation(
    conversation_in: ConversationCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Return the conversation with another user, creating it on first contact.
    """
    return await MessagingService(db).get_or_create_conversation(current_user.id, conversation_in.user_id)


@router.get("/", response_model=List[ConversationResponse])
async def read_conversations(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await MessagingService(db).get_conversations(current_user.id)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def read_unread_message_count(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    count = await MessagingService(db).get_unread_message_count(current_user.id)
    return {"count": count}


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse], responses={**RESP_AUTH_404})
async def read_messages(
    conversation_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Messages of a conversation, oldest first."""
    return await MessagingService(db).get_messages(conversation_id, current_user.id)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404},
)
async def send_message(
    conversation_id: str,
    message_in: MessageCreate,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await MessagingService(db).send_message(conversation_id, current_user.id, message_in.text)


@router.post("/{conversation_id}/read", response_model=AckResponse, responses={**RESP_AUTH_404})
async def mark_conversation_read(
    conversation_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    count = await MessagingService(db).mark_messages_as_read(conversation_id, current_user.id)
    return {"message": f"Marked {count} messages as read"}
