from typing import List

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import deps
from app.api.router import CustomAPIRouter
from app.api.v1.helpers.responses import RESP_AUTH_404
from app.db.mongodb import get_database
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.notification import NotificationResponse, UnreadCountResponse
from app.services.notifications import NotificationService

router = CustomAPIRouter()


@router.get("/", response_model=List[NotificationResponse])
async def read_notifications(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Latest notifications of the current user, newest first."""
    return await NotificationService(db).get_notifications(current_user.id)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def read_unread_count(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    count = await NotificationService(db).get_unread_notification_count(current_user.id)
    return {"count": count}


@router.post("/read-all", response_model=MessageResponse)
async def mark_all_as_read(
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    count = await NotificationService(db).mark_all_notifications_as_read(current_user.id)
    return {"message": f"Marked {count} notifications as read"}


@router.post("/{notification_id}/read", response_model=MessageResponse, responses={**RESP_AUTH_404})
async def mark_as_read(
    notification_id: str,
    current_user: User = Depends(deps.get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    await NotificationService(db).mark_notification_as_read(notification_id, current_user.id)
    return {"message": "Notification marked as read"}
