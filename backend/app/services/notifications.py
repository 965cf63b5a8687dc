"""
In-app notifications.

Every workflow that needs to tell a user something (invitations, responses,
direct messages) goes through NotificationService.create_notification.
"""

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.core.metrics import notifications_created_total
from app.models.notification import Notification
from app.repositories.notifications import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.notifications = NotificationRepository(db)

    async def create_notification(
        self,
        to_user_id: str,
        type: str,
        message: str,
        from_user_id: Optional[str] = None,
        from_user_name: Optional[str] = None,
        team_id: Optional[str] = None,
        team_name: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            to_user_id=to_user_id,
            type=type,
            message=message,
            from_user_id=from_user_id,
            from_user_name=from_user_name,
            team_id=team_id,
            team_name=team_name,
            conversation_id=conversation_id,
        )
        await self.notifications.create(notification)
        notifications_created_total.labels(type=type).inc()
        logger.debug(f"Notification {type} created for user {to_user_id}")
        return notification

    async def get_notifications(self, user_id: str) -> List[Notification]:
        return await self.notifications.find_for_user(user_id, limit=settings.NOTIFICATIONS_PAGE_SIZE)

    async def mark_notification_as_read(self, notification_id: str, user_id: str) -> None:
        if not await self.notifications.mark_read(notification_id, user_id):
            raise NotFoundError("Notification not found")

    async def mark_all_notifications_as_read(self, user_id: str) -> int:
        return await self.notifications.mark_all_read(user_id)

    async def get_unread_notification_count(self, user_id: str) -> int:
        return await self.notifications.count_unread(user_id)
