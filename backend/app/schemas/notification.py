from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NotificationResponse(BaseModel):
    id: str = Field(..., alias="_id")
    to_user_id: str
    from_user_id: Optional[str] = None
    from_user_name: Optional[str] = None
    type: str
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    conversation_id: Optional[str] = None
    message: str
    read: bool
    created_at: datetime

    class Config:
        populate_by_name = True


class UnreadCountResponse(BaseModel):
    count: int
