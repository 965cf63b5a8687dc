from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.core.cache import cache_service
from app.db.mongodb import db

router = APIRouter()


@router.get("/live", summary="Liveness probe")
async def liveness():
    return {"status": "alive"}


@router.get("/ready", summary="Readiness probe")
async def readiness():
    """
    Ready once MongoDB answers a ping. Redis is reported but never blocks
    readiness because the cache only fronts GitHub look-ups.
    """
    checks = {}

    if db.client is None:
        checks["database"] = "not_connected"
    else:
        try:
            await db.client.admin.command("ping")
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {e}"

    cache = await cache_service.health_check()
    checks["cache"] = "ok" if cache["status"] == "healthy" else "degraded"

    if checks["database"] != "ok":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
