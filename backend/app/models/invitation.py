from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
import uuid

from app.core.constants import INVITATION_STATUS_PENDING


class Invitation(BaseModel):
    """An invite (leader -> user) or a join request (user -> leader) for one team."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    type: str  # "invite", "join_request"
    status: str = INVITATION_STATUS_PENDING
    from_user_id: str
    from_user_name: Optional[str] = None
    to_user_id: str
    to_user_name: Optional[str] = None
    team_id: str
    team_name: Optional[str] = None
    role: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    responded_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
