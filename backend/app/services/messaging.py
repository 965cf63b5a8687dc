"""
Two-party direct messaging.

Sending a message updates the conversation preview and notifies the other
participant with a MESSAGE notification.
"""

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.constants import (
    AVATAR_FALLBACK_URL,
    DEFAULT_USER_NAME,
    MESSAGE_PREVIEW_LENGTH,
    NOTIFICATION_TYPE_MESSAGE,
)
from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from app.core.metrics import messages_sent_total
from app.models.conversation import Conversation, LastMessage, Message
from app.models.user import User
from app.repositories.conversations import ConversationRepository, MessageRepository
from app.repositories.users import UserRepository
from app.services.notifications import NotificationService

logger = logging.getLogger(__name__)


def preview_text(text: str) -> str:
    """Shorten a message for notifications."""
    if len(text) > MESSAGE_PREVIEW_LENGTH:
        return text[:MESSAGE_PREVIEW_LENGTH] + "..."
    return text


def avatar_for(profile: Optional[User]) -> str:
    if profile and profile.avatar:
        return profile.avatar
    name = profile.full_name if profile and profile.full_name else DEFAULT_USER_NAME
    return AVATAR_FALLBACK_URL.format(seed=name)


class MessagingService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.conversations = ConversationRepository(db)
        self.messages = MessageRepository(db)
        self.users = UserRepository(db)
        self.notification_service = NotificationService(db)

    async def get_or_create_conversation(self, user1_id: str, user2_id: str) -> Conversation:
        if user1_id == user2_id:
            raise ValidationFailedError("You cannot start a conversation with yourself")

        existing = await self.conversations.find_between(user1_id, user2_id)
        if existing:
            return existing

        profile1 = await self.users.get_by_id(user1_id)
        profile2 = await self.users.get_by_id(user2_id)
        if not profile2:
            raise NotFoundError("User not found")

        conversation = Conversation(
            participants=[user1_id, user2_id],
            participant_names={
                user1_id: profile1.full_name if profile1 and profile1.full_name else DEFAULT_USER_NAME,
                user2_id: profile2.full_name or DEFAULT_USER_NAME,
            },
            participant_avatars={
                user1_id: avatar_for(profile1),
                user2_id: avatar_for(profile2),
            },
        )
        await self.conversations.create(conversation)
        logger.debug(f"Conversation {conversation.id} created between {user1_id} and {user2_id}")
        return conversation

    async def get_conversation_for_participant(self, conversation_id: str, user_id: str) -> Conversation:
        conversation = await self.conversations.get_by_id(conversation_id)
        if not conversation:
            raise NotFoundError("Conversation not found")
        if user_id not in conversation.participants:
            raise PermissionDeniedError("Not a participant of this conversation")
        return conversation

    async def send_message(self, conversation_id: str, sender_id: str, text: str) -> Message:
        conversation = await self.get_conversation_for_participant(conversation_id, sender_id)
        sender = await self.users.get_by_id(sender_id)
        sender_name = sender.full_name if sender and sender.full_name else DEFAULT_USER_NAME

        message = Message(
            conversation_id=conversation_id,
            participants=conversation.participants,
            sender_id=sender_id,
            sender_name=sender_name,
            text=text,
        )
        await self.messages.create(message)
        await self.conversations.set_last_message(
            conversation_id,
            LastMessage(text=text, sender_id=sender_id, sent_at=message.created_at),
        )

        recipient_id = conversation.other_participant(sender_id)
        if recipient_id:
            await self.notification_service.create_notification(
                to_user_id=recipient_id,
                type=NOTIFICATION_TYPE_MESSAGE,
                message=preview_text(text),
                from_user_id=sender_id,
                from_user_name=sender_name,
                conversation_id=conversation_id,
            )
        messages_sent_total.inc()
        return message

    async def get_conversations(self, user_id: str) -> List[Conversation]:
        return await self.conversations.find_for_user(user_id)

    async def get_messages(self, conversation_id: str, user_id: str) -> List[Message]:
        await self.get_conversation_for_participant(conversation_id, user_id)
        return await self.messages.find_by_conversation(conversation_id)

    async def mark_messages_as_read(self, conversation_id: str, user_id: str) -> int:
        await self.get_conversation_for_participant(conversation_id, user_id)
        return await self.messages.mark_read(conversation_id, user_id)

    async def get_unread_message_count(self, user_id: str) -> int:
        return await self.messages.count_unread(user_id)
