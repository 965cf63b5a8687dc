import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.constants import USERNAME_PATTERN
from app.models.user import GitHubStats, Skill


def validate_password_strength(password: str) -> str:
    """Validate password meets security requirements."""
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        raise ValueError("Password must contain at least one digit")
    return password


class UserSignup(BaseModel):
    email: EmailStr
    password: str
    full_name: str = Field(..., min_length=1, max_length=100)
    # Generated from the full name when omitted
    username: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if not re.match(USERNAME_PATTERN, v):
            raise ValueError("Username must be 3-15 characters: lowercase letters, numbers, underscore")
        return v


class UserUpdateMe(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = None
    primary_role: Optional[str] = None
    skills: Optional[List[Skill]] = None


class UsernameUpdate(BaseModel):
    username: str


class UsernameAvailability(BaseModel):
    username: str
    available: bool


class UserPublic(BaseModel):
    """Profile as other users see it."""

    id: str = Field(..., alias="_id")
    username: str
    full_name: str = ""
    bio: Optional[str] = None
    avatar: Optional[str] = None
    primary_role: Optional[str] = None
    skills: List[Skill] = []
    team_id: Optional[str] = None
    is_team_leader: bool = False
    github_verified: bool = False
    github_username: Optional[str] = None
    github_profile_url: Optional[str] = None
    github_stats: Optional[GitHubStats] = None
    created_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class UserMe(UserPublic):
    """Own profile, including account fields."""

    email: EmailStr
    is_active: bool = True
    github_verified_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
