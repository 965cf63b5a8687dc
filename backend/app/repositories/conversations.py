"""
Conversation and Message Repositories

Centralizes all database operations for direct messaging.
"""

from typing import List, Optional

from app.models.conversation import Conversation, LastMessage, Message
from app.repositories.base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversation database operations."""

    collection_name = "conversations"
    model_class = Conversation

    async def find_between(self, user1_id: str, user2_id: str) -> Optional[Conversation]:
        """The two-party conversation between both users, if it exists."""
        return await self.find_one({"participants": {"$all": [user1_id, user2_id], "$size": 2}})

    async def find_for_user(self, user_id: str, limit: int = 100) -> List[Conversation]:
        """Conversations of a user, most recently active first."""
        return await self.find_many(
            {"participants": user_id},
            sort_by="updated_at",
            sort_order=-1,
            limit=limit,
        )

    async def set_last_message(self, conversation_id: str, last_message: LastMessage) -> None:
        await self.update_raw(
            conversation_id,
            {"$set": {"last_message": last_message.model_dump(), "updated_at": last_message.sent_at}},
        )


class MessageRepository(BaseRepository[Message]):
    """Repository for message database operations."""

    collection_name = "messages"
    model_class = Message

    async def find_by_conversation(self, conversation_id: str, limit: int = 500) -> List[Message]:
        """Messages of a conversation, oldest first."""
        return await self.find_many(
            {"conversation_id": conversation_id},
            sort_by="created_at",
            sort_order=1,
            limit=limit,
        )

    async def mark_read(self, conversation_id: str, reader_id: str) -> int:
        """Mark the messages the reader received in a conversation as read."""
        return await self.update_many(
            {"conversation_id": conversation_id, "sender_id": {"$ne": reader_id}, "read": False},
            {"read": True},
        )

    async def count_unread(self, user_id: str) -> int:
        """Unread messages addressed to the user across all conversations."""
        return await self.count({"participants": user_id, "sender_id": {"$ne": user_id}, "read": False})
