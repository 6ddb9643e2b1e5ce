from fastapi import APIRouter
from fastapi.responses import JSONResponse
from typing import Any
import logging

from app.ws import manager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/redis")
async def redis_health() -> Any:
    """Return Redis connection health. If `REDIS_URL` is not configured, returns status `not_configured`."""
    if not manager.redis:
        return JSONResponse({"status": "not_configured", "details": "REDIS_URL not set"}, status_code=200)

    try:
        ok = await manager.redis.ping()
        if ok:
            return {"status": "ok", "redis": "connected"}
        else:
            return JSONResponse({"status": "error", "redis": "ping_failed"}, status_code=500)
    except Exception as e:
        logger.warning(f"Redis ping failed: {e}")
        return JSONResponse({"status": "error", "error": str(e)}, status_code=500)
