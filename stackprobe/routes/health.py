"""Dependency health: one trivial query and one cache ping."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..cache import CacheClient
from ..database import DatabaseClient
from ..logging_config import logger
from ..models.schemas import HealthResponse
from ..utils.clients import get_cache, get_database

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={503: {"model": HealthResponse}},
)
async def health(
    database: DatabaseClient = Depends(get_database),
    cache: CacheClient = Depends(get_cache),
) -> HealthResponse | JSONResponse:
    try:
        async with database.lease() as lease:
            await lease.query("SELECT 1")
        await cache.ping()
    except Exception as exc:
        logger.exception("health.unhealthy", error=str(exc), error_type=exc.__class__.__name__)
        payload = HealthResponse(status="unhealthy", error=str(exc))
        return JSONResponse(status_code=503, content=payload.model_dump())
    return HealthResponse(status="ok")
