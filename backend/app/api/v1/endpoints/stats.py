from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.router import CustomAPIRouter
from app.db.mongodb import get_database
from app.schemas.stats import StatsResponse
from app.services.stats import get_platform_stats

router = CustomAPIRouter()


@router.get("/", response_model=StatsResponse)
async def read_stats(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Public landing page counters."""
    return await get_platform_stats(db)
