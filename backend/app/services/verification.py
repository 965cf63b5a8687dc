"""
Skill verification records.

A user has at most one verification in effect. Recording a new one, or
editing the skills on the profile, invalidates the previous one.
"""

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.constants import INVALIDATION_REASONS
from app.core.exceptions import ValidationFailedError
from app.core.metrics import verifications_total
from app.models.verification import SkillVerification
from app.repositories.skill_verifications import SkillVerificationRepository

logger = logging.getLogger(__name__)


class SkillVerificationService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.verifications = SkillVerificationRepository(db)

    async def get_skill_verification(self, user_id: str) -> Optional[SkillVerification]:
        return await self.verifications.get_latest_verified(user_id)

    async def create_skill_verification(
        self,
        user_id: str,
        source: str,
        verified_skills: List[str],
        extracted_name: Optional[str] = None,
        course_topics: Optional[List[str]] = None,
        name_match: Optional[bool] = None,
        reason: Optional[str] = None,
    ) -> SkillVerification:
        superseded = await self.verifications.invalidate_active(user_id, "manual")
        if superseded:
            logger.info(f"Superseded {superseded} skill verification(s) of user {user_id}")

        verification = SkillVerification(
            user_id=user_id,
            source=source,
            verified_skills=verified_skills,
            extracted_name=extracted_name,
            course_topics=course_topics or [],
            name_match=name_match,
            reason=reason,
        )
        await self.verifications.create(verification)
        verifications_total.labels(source=source, result="verified").inc()
        return verification

    async def invalidate_skill_verification(self, user_id: str, reason: str) -> int:
        if reason not in INVALIDATION_REASONS:
            raise ValidationFailedError(f"Invalid invalidation reason: {reason}")
        count = await self.verifications.invalidate_active(user_id, reason)
        if count:
            logger.info(f"Invalidated skill verification of user {user_id} ({reason})")
        return count
