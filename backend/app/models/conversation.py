from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime, timezone
import uuid


class LastMessage(BaseModel):
    text: str
    sender_id: str
    sent_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Conversation(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    participants: List[str]  # exactly two user ids
    participant_names: Dict[str, str] = {}
    participant_avatars: Dict[str, str] = {}
    last_message: Optional[LastMessage] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def other_participant(self, user_id: str) -> Optional[str]:
        for participant in self.participants:
            if participant != user_id:
                return participant
        return None

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True


class Message(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    conversation_id: str
    participants: List[str] = []
    sender_id: str
    sender_name: Optional[str] = None
    text: str
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
