"""
User Repository

Accounts and profiles. A user's team association lives on the user document
(``team_id``/``is_team_leader``) and is only ever claimed through a
conditional update.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.models.user import User
from app.repositories.base import BaseRepository


def _team_fields(team_id: Optional[str], is_leader: bool) -> Dict[str, Any]:
    return {"team_id": team_id, "is_team_leader": is_leader, "updated_at": datetime.now(timezone.utc)}


class UserRepository(BaseRepository[User]):
    collection_name = "users"
    model_class = User

    async def get_by_username(self, username: str) -> Optional[User]:
        """Usernames are stored lowercase."""
        return await self.find_one({"username": username.lower()})

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.find_one({"email": email})

    async def find_by_ids(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        return await self.find_many({"_id": {"$in": user_ids}}, limit=len(user_ids))

    async def exists_by_username(self, username: str, exclude_user_id: Optional[str] = None) -> bool:
        query: Dict[str, Any] = {"username": username.lower()}
        if exclude_user_id:
            query["_id"] = {"$ne": exclude_user_id}
        return await self.collection.find_one(query) is not None

    async def exists_by_email(self, email: str) -> bool:
        return await self.collection.find_one({"email": email}) is not None

    async def claim_team(self, user_id: str, team_id: str, is_leader: bool = False) -> bool:
        """
        Attach a user to a team only if they are not in one yet.

        Returns False when the user already has a team (or does not exist).
        """
        result = await self.collection.update_one(
            {"_id": user_id, "team_id": None},
            {"$set": _team_fields(team_id, is_leader)},
        )
        return result.modified_count > 0

    async def release_team(self, user_id: str) -> None:
        await self.collection.update_one({"_id": user_id}, {"$set": _team_fields(None, False)})

    async def release_team_for_members(self, team_id: str) -> int:
        """Detach every user that still points at the team."""
        result = await self.collection.update_many({"team_id": team_id}, {"$set": _team_fields(None, False)})
        return result.modified_count

    async def find_available(
        self,
        exclude_user_id: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 100,
    ) -> List[User]:
        """Users without a team, optionally filtered by primary role, newest first."""
        query: Dict[str, Any] = {"team_id": None}
        if exclude_user_id:
            query["_id"] = {"$ne": exclude_user_id}
        if role:
            query["primary_role"] = role
        return await self.find_many(query, limit=limit, sort_by="created_at", sort_order=-1)

    async def count_available(self) -> int:
        return await self.count({"team_id": None})

    async def distinct_roles(self) -> List[str]:
        """All non-empty primary roles in use, sorted."""
        roles = await self.collection.distinct("primary_role", {"primary_role": {"$nin": [None, ""]}})
        return sorted(roles)

    async def search(
        self,
        text: Optional[str] = None,
        role: Optional[str] = None,
        exclude_user_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[User]:
        """Case-insensitive search over full name, primary role and skill names."""
        query: Dict[str, Any] = {}
        if text:
            pattern = {"$regex": re.escape(text.strip()), "$options": "i"}
            query["$or"] = [
                {"full_name": pattern},
                {"primary_role": pattern},
                {"skills.name": pattern},
            ]
        if role:
            query["primary_role"] = role
        if exclude_user_id:
            query["_id"] = {"$ne": exclude_user_id}
        return await self.find_many(query, limit=limit, sort_by="created_at", sort_order=-1)
