from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class InvitationCreate(BaseModel):
    type: Literal["invite", "join_request"]
    # Ignored for join requests, which always go to the team leader
    to_user_id: Optional[str] = None
    team_id: str
    role: Optional[str] = None
    message: Optional[str] = Field(None, max_length=500)


class InvitationRespond(BaseModel):
    status: Literal["accepted", "rejected"]
    role: Optional[str] = None


class InvitationResponse(BaseModel):
    id: str = Field(..., alias="_id")
    type: str
    status: str
    from_user_id: str
    from_user_name: Optional[str] = None
    # Ignored for join requests, which always go to the team leader
    to_user_id: Optional[str] = None
    to_user_name: Optional[str] = None
    team_id: str
    team_name: Optional[str] = None
    role: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime
    responded_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
