from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.user import GitHubStats


class GitHubVerificationRequest(BaseModel):
    profile_url: str = Field(..., description="https://github.com/<username>?tab=repositories")
    access_token: str = Field(..., description="GitHub OAuth access token obtained by the client")


class GitHubVerificationResponse(BaseModel):
    github_username: str
    github_profile_url: str
    github_stats: GitHubStats


class GitHubRepository(BaseModel):
    name: str
    languages: List[str]


class GitHubAnalysisResponse(BaseModel):
    username: str
    profile_url: str
    inferred_skills: List[str]
    repositories: List[GitHubRepository]


class CertificateAnalysisRequest(BaseModel):
    image_base64: str = Field(..., min_length=1, description="JPEG image, base64 encoded")


class CertificateAnalysisResponse(BaseModel):
    extracted_name: str
    inferred_skills: List[str] = []
    course_topics: List[str] = []
    name_match: bool
    reason: str = ""


class SkillVerificationResponse(BaseModel):
    id: str = Field(..., alias="_id")
    user_id: str
    source: str
    status: str
    verified_skills: List[str] = []
    extracted_name: Optional[str] = None
    course_topics: List[str] = []
    name_match: Optional[bool] = None
    reason: Optional[str] = None
    verified_at: datetime
    invalidated_at: Optional[datetime] = None
    invalidation_reason: Optional[str] = None

    class Config:
        populate_by_name = True
