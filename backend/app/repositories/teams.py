"""
Team Repository

Membership changes are single conditional updates on the team document so
that capacity and duplicate checks hold under concurrent joins.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from app.core.constants import TEAM_STATUS_FORMING
from app.models.team import Team
from app.repositories.base import BaseRepository

_MEMBERS_USER_ID = "members.user_id"

# Matches teams whose member list is below capacity
_HAS_ROOM = {"$expr": {"$lt": [{"$size": "$members"}, "$max_members"]}}


class TeamRepository(BaseRepository[Team]):
    collection_name = "teams"
    model_class = Team

    async def find_by_member(self, user_id: str) -> List[Team]:
        return await self.find_many({_MEMBERS_USER_ID: user_id}, sort_by="created_at", sort_order=-1)

    async def find_available(self, skip: int = 0, limit: int = 100) -> List[Team]:
        """Forming teams with at least one free slot, newest first."""
        return await self.find_many(
            {"status": TEAM_STATUS_FORMING, **_HAS_ROOM},
            skip=skip,
            limit=limit,
            sort_by="created_at",
            sort_order=-1,
        )

    async def count_available(self) -> int:
        return await self.count({"status": TEAM_STATUS_FORMING, **_HAS_ROOM})

    async def add_member(self, team_id: str, member_data: Dict[str, Any]) -> bool:
        """Append a member if the team is forming, has room and does not list them yet."""
        result = await self.collection.update_one(
            {
                "_id": team_id,
                "status": TEAM_STATUS_FORMING,
                _MEMBERS_USER_ID: {"$ne": member_data["user_id"]},
                **_HAS_ROOM,
            },
            {"$push": {"members": member_data}, "$set": {"updated_at": datetime.now(timezone.utc)}},
        )
        return result.modified_count > 0

    async def remove_member(self, team_id: str, user_id: str) -> bool:
        result = await self.collection.update_one(
            {"_id": team_id},
            {"$pull": {"members": {"user_id": user_id}}, "$set": {"updated_at": datetime.now(timezone.utc)}},
        )
        return result.modified_count > 0
