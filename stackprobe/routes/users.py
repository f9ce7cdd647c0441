"""Database clock lookup that stamps the last call time in Redis."""
from __future__ import annotations

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..cache import CacheClient
from ..database import DatabaseClient
from ..logging_config import logger
from ..models.schemas import LastCallResponse
from ..utils.clients import get_cache, get_database

router = APIRouter(prefix="/api", tags=["users"])

LAST_CALL_KEY = "last_call"


@router.get(
    "/users",
    response_model=LastCallResponse,
    response_model_exclude_none=True,
    responses={500: {"model": LastCallResponse}},
)
async def users(
    database: DatabaseClient = Depends(get_database),
    cache: CacheClient = Depends(get_cache),
) -> LastCallResponse | JSONResponse:
    try:
        async with database.lease() as lease:
            rows = await lease.query("SELECT NOW() AS now")
            await cache.set(LAST_CALL_KEY, int(time.time() * 1000))
        now = rows[0]["now"]
    except Exception as exc:
        logger.exception("users.failed", error=str(exc))
        payload = LastCallResponse(ok=False, error=str(exc))
        return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))
    return LastCallResponse(ok=True, time=now)
