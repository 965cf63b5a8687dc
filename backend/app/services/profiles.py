"""
Profiles, usernames and people discovery.
"""

import logging
import random
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.constants import (
    DEFAULT_USER_NAME,
    USERNAME_GENERATION_ATTEMPTS,
    USERNAME_PATTERN,
)
from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models.user import User
from app.repositories.invitations import InvitationRepository
from app.repositories.posts import PostRepository
from app.repositories.users import UserRepository
from app.services.teams import TeamService
from app.services.verification import SkillVerificationService

logger = logging.getLogger(__name__)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def normalize_username(username: str) -> str:
    return username.strip().lower().replace("@", "")


def is_valid_username(username: str) -> bool:
    return re.match(USERNAME_PATTERN, username) is not None


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def username_candidate(full_name: str) -> str:
    """Lowercase alphanumeric stem of the name plus a random 4 digit suffix."""
    stem = re.sub(r"[^a-z0-9]", "", full_name.lower())[:10]
    if len(stem) < 2:
        stem = "user"
    return f"{stem}{random.randint(1000, 9999)}"


class ProfileService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = UserRepository(db)
        self.posts = PostRepository(db)
        self.invitations = InvitationRepository(db)
        self.team_service = TeamService(db)
        self.verification_service = SkillVerificationService(db)

    async def get_profile(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_profile_by_username(self, username: str) -> User:
        user = await self.users.get_by_username(normalize_username(username))
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_user_email_by_username(self, username: str) -> Optional[str]:
        user = await self.users.get_by_username(normalize_username(username))
        return user.email if user else None

    async def update_profile(self, user_id: str, data: Dict[str, Any]) -> User:
        update_data = {k: v for k, v in data.items() if v is not None}
        if "username" in update_data:
            update_data["username"] = update_data["username"].lower()

        if "skills" in update_data:
            await self.verification_service.invalidate_skill_verification(user_id, "profile_edited")

        update_data["updated_at"] = datetime.now(timezone.utc)
        user = await self.users.update(user_id, update_data)
        if not user:
            raise NotFoundError("User not found")
        return user

    # Usernames

    async def is_username_available(self, username: str, exclude_user_id: Optional[str] = None) -> bool:
        if not username:
            return False
        return not await self.users.exists_by_username(username.lower(), exclude_user_id)

    async def update_username(self, user_id: str, new_username: str) -> User:
        normalized = new_username.strip().lower()
        if not is_valid_username(normalized):
            raise ValidationFailedError("Invalid username format")
        if not await self.is_username_available(normalized, user_id):
            raise ConflictError("Username is already taken")

        return await self.users.update(
            user_id, {"username": normalized, "updated_at": datetime.now(timezone.utc)}
        )

    async def generate_unique_username(self, full_name: str) -> str:
        for _ in range(USERNAME_GENERATION_ATTEMPTS):
            candidate = username_candidate(full_name)
            if is_valid_username(candidate) and await self.is_username_available(candidate):
                return candidate

        return f"user{to_base36(int(time.time() * 1000))}"

    async def ensure_user_has_username(self, user_id: str) -> Optional[str]:
        user = await self.users.get_by_id(user_id)
        if not user:
            return None
        if user.username:
            return user.username

        username = await self.generate_unique_username(user.full_name or DEFAULT_USER_NAME)
        await self.users.update(user_id, {"username": username, "updated_at": datetime.now(timezone.utc)})
        logger.info(f"Assigned generated username {username} to user {user_id}")
        return username

    # Discover

    async def get_all_users(self, exclude_user_id: Optional[str] = None) -> List[User]:
        query = {"_id": {"$ne": exclude_user_id}} if exclude_user_id else {}
        return await self.users.find_many(query, sort_by="created_at", sort_order=-1)

    async def get_available_users(self, exclude_user_id: Optional[str] = None) -> List[User]:
        return await self.users.find_available(exclude_user_id)

    async def get_available_users_by_role(self, role: str, exclude_user_id: Optional[str] = None) -> List[User]:
        return await self.users.find_available(exclude_user_id, role=role)

    async def get_available_roles(self) -> List[str]:
        return await self.users.distinct_roles()

    async def search_users(
        self,
        text: Optional[str] = None,
        role: Optional[str] = None,
        exclude_user_id: Optional[str] = None,
    ) -> List[User]:
        return await self.users.search(text=text, role=role, exclude_user_id=exclude_user_id)

    async def delete_user_completely(self, user_id: str) -> bool:
        user = await self.users.get_by_id(user_id)
        if not user:
            return False

        await self.team_service.release_user(user)
        await self.invitations.delete_pending_for_user(user_id)
        deleted_posts = await self.posts.delete_by_author(user_id)
        await self.users.delete(user_id)
        logger.info(f"Deleted user {user_id} and {deleted_posts} post(s)")
        return True
