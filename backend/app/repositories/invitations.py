"""
Invitation Repository

Centralizes all database operations for invitations and join requests.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from app.core.constants import (
    INVITATION_STATUS_PENDING,
    INVITATION_STATUS_REJECTED,
    INVITATION_TYPE_JOIN_REQUEST,
)
from app.models.invitation import Invitation
from app.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    """Repository for invitation database operations."""

    collection_name = "invitations"
    model_class = Invitation

    async def find_pending(self, from_user_id: str, team_id: str) -> Optional[Invitation]:
        """Pending invitation from a sender for a team, if any."""
        return await self.find_one(
            {"from_user_id": from_user_id, "team_id": team_id, "status": INVITATION_STATUS_PENDING}
        )

    async def find_incoming(self, user_id: str) -> List[Invitation]:
        """Pending invitations addressed to the user, newest first."""
        return await self.find_many(
            {"to_user_id": user_id, "status": INVITATION_STATUS_PENDING},
            sort_by="created_at",
            sort_order=-1,
        )

    async def find_outgoing(self, user_id: str) -> List[Invitation]:
        """All invitations sent by the user, newest first."""
        return await self.find_many({"from_user_id": user_id}, sort_by="created_at", sort_order=-1)

    async def find_join_requests(self, team_id: str) -> List[Invitation]:
        return await self.find_many(
            {
                "team_id": team_id,
                "type": INVITATION_TYPE_JOIN_REQUEST,
                "status": INVITATION_STATUS_PENDING,
            },
            sort_by="created_at",
            sort_order=-1,
        )

    async def resolve(self, invitation_id: str, status: str) -> bool:
        """
        Move a pending invitation to its final status.

        Returns False when the invitation was already resolved.
        """
        result = await self.collection.update_one(
            {"_id": invitation_id, "status": INVITATION_STATUS_PENDING},
            {"$set": {"status": status, "responded_at": datetime.now(timezone.utc)}},
        )
        return result.modified_count > 0

    async def reopen(self, invitation_id: str, status: str) -> bool:
        """
        Undo ``resolve`` for an invitation still in ``status``.

        If the sender opened a new pending invitation for the same team in the
        meantime, the unique index refuses the revert and this one is rejected
        instead. Returns True when the invitation is pending again.
        """
        claimed = {"_id": invitation_id, "status": status}
        try:
            result = await self.collection.update_one(
                claimed, {"$set": {"status": INVITATION_STATUS_PENDING, "responded_at": None}}
            )
        except DuplicateKeyError:
            await self.collection.update_one(claimed, {"$set": {"status": INVITATION_STATUS_REJECTED}})
            return False
        return result.modified_count > 0

    async def delete_by_team(self, team_id: str) -> int:
        return await self.delete_many({"team_id": team_id})

    async def delete_pending_for_user(self, user_id: str) -> int:
        """Drop pending invitations the user sent or received."""
        return await self.delete_many(
            {
                "status": INVITATION_STATUS_PENDING,
                "$or": [{"from_user_id": user_id}, {"to_user_id": user_id}],
            }
        )
