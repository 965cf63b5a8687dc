"""
Notification Repository

Centralizes all database operations for in-app notifications.
"""

from typing import List

from app.models.notification import Notification
from app.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification database operations."""

    collection_name = "notifications"
    model_class = Notification

    async def find_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        """Newest notifications for a user."""
        return await self.find_many(
            {"to_user_id": user_id},
            sort_by="created_at",
            sort_order=-1,
            limit=limit,
        )

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        """Mark one notification read. Only matches the owner's notification."""
        result = await self.collection.update_one(
            {"_id": notification_id, "to_user_id": user_id},
            {"$set": {"read": True}},
        )
        return result.matched_count > 0

    async def mark_all_read(self, user_id: str) -> int:
        return await self.update_many({"to_user_id": user_id, "read": False}, {"read": True})

    async def count_unread(self, user_id: str) -> int:
        return await self.count({"to_user_id": user_id, "read": False})
