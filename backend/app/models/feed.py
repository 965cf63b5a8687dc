from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone
import uuid

from app.core.constants import POST_TYPE_USER_POST


class FeedPost(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    author_id: str
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None
    author_role: Optional[str] = None
    type: str = POST_TYPE_USER_POST  # "team_created", "member_joined", "user_post"
    title: str
    description: Optional[str] = None
    tags: List[str] = []
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    roles_needed: List[str] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
