"""
Schema Exports

Centralized export of the Pydantic request and response models
used across the API.
"""

from app.schemas.auth import LogoutResponse, MessageResponse
from app.schemas.feed import PostCreate, PostResponse, PostUpdate
from app.schemas.invitation import InvitationCreate, InvitationRespond, InvitationResponse
from app.schemas.message import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse as ChatMessageResponse,
)
from app.schemas.notification import NotificationResponse, UnreadCountResponse
from app.schemas.stats import StatsResponse
from app.schemas.team import TeamCreate, TeamMemberProfile, TeamResponse, TeamUpdate
from app.schemas.token import Token, TokenPayload
from app.schemas.user import UserMe, UserPublic, UserSignup, UserUpdateMe
from app.schemas.verification import (
    CertificateAnalysisResponse,
    GitHubAnalysisResponse,
    SkillVerificationResponse,
)
from app.schemas.workspace import TaskCreate, TaskResponse, WorkspaceLogResponse

__all__ = [
    "LogoutResponse",
    "MessageResponse",
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "InvitationCreate",
    "InvitationRespond",
    "InvitationResponse",
    "ConversationCreate",
    "ConversationResponse",
    "MessageCreate",
    "ChatMessageResponse",
    "NotificationResponse",
    "UnreadCountResponse",
    "StatsResponse",
    "TeamCreate",
    "TeamMemberProfile",
    "TeamResponse",
    "TeamUpdate",
    "Token",
    "TokenPayload",
    "UserMe",
    "UserPublic",
    "UserSignup",
    "UserUpdateMe",
    "CertificateAnalysisResponse",
    "GitHubAnalysisResponse",
    "SkillVerificationResponse",
    "TaskCreate",
    "TaskResponse",
    "WorkspaceLogResponse",
]
