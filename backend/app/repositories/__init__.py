"""
Repository Pattern for Database Access

Provides a clean abstraction layer over MongoDB collections,
centralizing database operations and reducing code duplication.
"""

from app.repositories.base import BaseRepository
from app.repositories.conversations import ConversationRepository, MessageRepository
from app.repositories.invitations import InvitationRepository
from app.repositories.notifications import NotificationRepository
from app.repositories.posts import PostRepository
from app.repositories.skill_verifications import SkillVerificationRepository
from app.repositories.teams import TeamRepository
from app.repositories.users import UserRepository
from app.repositories.workspace import TeamTaskRepository, WorkspaceLogRepository

__all__ = [
    "BaseRepository",
    "ConversationRepository",
    "InvitationRepository",
    "MessageRepository",
    "NotificationRepository",
    "PostRepository",
    "SkillVerificationRepository",
    "TeamRepository",
    "TeamTaskRepository",
    "UserRepository",
    "WorkspaceLogRepository",
]
