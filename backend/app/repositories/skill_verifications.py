"""
Skill Verification Repository

Centralizes all database operations for skill verification records.
"""

from datetime import datetime, timezone
from typing import Optional

from app.core.constants import VERIFICATION_STATUS_INVALIDATED, VERIFICATION_STATUS_VERIFIED
from app.models.verification import SkillVerification
from app.repositories.base import BaseRepository


class SkillVerificationRepository(BaseRepository[SkillVerification]):
    """Repository for skill verification database operations."""

    collection_name = "skill_verifications"
    model_class = SkillVerification

    async def get_latest_verified(self, user_id: str) -> Optional[SkillVerification]:
        """Most recent verification still in effect for the user."""
        results = await self.find_many(
            {"user_id": user_id, "status": VERIFICATION_STATUS_VERIFIED},
            sort_by="verified_at",
            sort_order=-1,
            limit=1,
        )
        return results[0] if results else None

    async def invalidate_active(self, user_id: str, reason: str) -> int:
        """Invalidate every verification of the user that is still in effect."""
        return await self.update_many(
            {"user_id": user_id, "status": VERIFICATION_STATUS_VERIFIED},
            {
                "status": VERIFICATION_STATUS_INVALIDATED,
                "invalidated_at": datetime.now(timezone.utc),
                "invalidation_reason": reason,
            },
        )
