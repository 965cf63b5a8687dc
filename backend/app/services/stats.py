from typing import Dict

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.repositories.teams import TeamRepository
from app.repositories.users import UserRepository


async def get_available_users_count(db: AsyncIOMotorDatabase) -> int:
    """Users that are not part of any team."""
    return await UserRepository(db).count_available()


async def get_available_teams_count(db: AsyncIOMotorDatabase) -> int:
    """Forming teams that still have a free slot."""
    return await TeamRepository(db).count_available()


async def get_platform_stats(db: AsyncIOMotorDatabase) -> Dict[str, int]:
    return {
        "available_users": await get_available_users_count(db),
        "available_teams": await get_available_teams_count(db),
    }
