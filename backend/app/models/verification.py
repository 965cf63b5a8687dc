from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone
import uuid

from app.core.constants import VERIFICATION_STATUS_VERIFIED


class SkillVerification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    user_id: str
    source: str  # "github", "certificate"
    status: str = VERIFICATION_STATUS_VERIFIED
    verified_skills: List[str] = []
    extracted_name: Optional[str] = None
    course_topics: List[str] = []
    name_match: Optional[bool] = None
    reason: Optional[str] = None
    verified_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    invalidated_at: Optional[datetime] = None
    invalidation_reason: Optional[str] = None  # "profile_edited", "manual", "expired"

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
