import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.constants import TEAM_ROLE_DEFAULT, TEAM_STATUS_FORMING


class TeamMember(BaseModel):
    user_id: str
    role: str = TEAM_ROLE_DEFAULT
    user_name: Optional[str] = None
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Team(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    name: str
    description: Optional[str] = None
    leader_id: str
    leader_name: Optional[str] = None
    members: List[TeamMember] = []
    max_members: int = 4
    roles_needed: List[str] = []
    hackathon: Optional[str] = None
    status: str = TEAM_STATUS_FORMING
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_member(self, user_id: str) -> bool:
        return any(m.user_id == user_id for m in self.members)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.max_members

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
