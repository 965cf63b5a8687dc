from pydantic import BaseModel, Field, EmailStr
from typing import List, Optional
from datetime import datetime, timezone
import uuid


class Skill(BaseModel):
    name: str
    level: str = "Intermediate"  # "Beginner", "Intermediate", "Advanced", "Expert"


class GitHubStats(BaseModel):
    public_repos: int = 0
    followers: int = 0
    following: int = 0


class User(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    username: str
    email: EmailStr
    hashed_password: str
    is_active: bool = True
    last_logout_at: Optional[datetime] = None

    # Profile
    full_name: str = ""
    bio: Optional[str] = None
    avatar: Optional[str] = None
    primary_role: Optional[str] = None
    skills: List[Skill] = []

    # Team association, at most one team per user
    team_id: Optional[str] = None
    is_team_leader: bool = False

    # GitHub verification
    github_verified: bool = False
    github_username: Optional[str] = None
    github_profile_url: Optional[str] = None
    github_verified_at: Optional[datetime] = None
    github_stats: Optional[GitHubStats] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
