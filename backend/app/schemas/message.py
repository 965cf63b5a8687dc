from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ConversationCreate(BaseModel):
    user_id: str = Field(..., description="The other participant")


class LastMessageSchema(BaseModel):
    text: str
    sender_id: str
    sent_at: datetime


class ConversationResponse(BaseModel):
    id: str = Field(..., alias="_id")
    participants: List[str]
    participant_names: Dict[str, str] = {}
    participant_avatars: Dict[str, str] = {}
    last_message: Optional[LastMessageSchema] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True


class MessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    id: str = Field(..., alias="_id")
    conversation_id: str
    sender_id: str
    sender_name: Optional[str] = None
    text: str
    read: bool
    created_at: datetime

    class Config:
        populate_by_name = True
