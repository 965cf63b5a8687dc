from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.constants import TEAM_MAX_MEMBERS, TEAM_MIN_MEMBERS
from app.models.user import Skill


class TeamMemberSchema(BaseModel):
    user_id: str
    role: str
    user_name: Optional[str] = None
    joined_at: Optional[datetime] = None


class TeamBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    roles_needed: List[str] = []
    hackathon: Optional[str] = None


class TeamCreate(TeamBase):
    max_members: Optional[int] = Field(None, ge=TEAM_MIN_MEMBERS, le=TEAM_MAX_MEMBERS)


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    roles_needed: Optional[List[str]] = None
    hackathon: Optional[str] = None
    max_members: Optional[int] = Field(None, ge=TEAM_MIN_MEMBERS, le=TEAM_MAX_MEMBERS)
    status: Optional[str] = Field(None, pattern="^(forming|closed)$")


class TeamResponse(TeamBase):
    id: str = Field(..., alias="_id")
    leader_id: str
    leader_name: Optional[str] = None
    members: List[TeamMemberSchema]
    max_members: int
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True


class TeamMemberProfile(BaseModel):
    """A team member joined with their profile."""

    user_id: str
    role: str
    joined_at: Optional[datetime] = None
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar: Optional[str] = None
    primary_role: Optional[str] = None
    skills: List[Skill] = []
