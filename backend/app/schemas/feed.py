from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    tags: List[str] = []


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    tags: Optional[List[str]] = None


class PostResponse(BaseModel):
    id: str = Field(..., alias="_id")
    author_id: str
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None
    author_role: Optional[str] = None
    type: str
    title: str
    description: Optional[str] = None
    tags: List[str] = []
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    roles_needed: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
