from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
import uuid


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    to_user_id: str
    from_user_id: Optional[str] = None
    from_user_name: Optional[str] = None
    type: str  # "INVITE", "JOIN_REQUEST", "ACCEPTED", "REJECTED", "MESSAGE"
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    conversation_id: Optional[str] = None
    message: str
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
