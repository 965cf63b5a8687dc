from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    assigned_to: List[str] = []


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    assigned_to: Optional[List[str]] = None


class TaskCompletionUpdate(BaseModel):
    completed: bool


class TaskResponse(BaseModel):
    id: str = Field(..., alias="_id")
    team_id: str
    title: str
    assigned_to: List[str] = []
    completed: bool
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        populate_by_name = True


class WorkspaceLogCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class WorkspaceLogResponse(BaseModel):
    id: str = Field(..., alias="_id")
    team_id: str
    user_id: str
    user_name: Optional[str] = None
    message: str
    created_at: datetime

    class Config:
        populate_by_name = True
