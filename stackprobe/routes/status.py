"""Process liveness; never touches the backing stores."""
from __future__ import annotations

from fastapi import APIRouter

from ..models.schemas import StatusResponse

router = APIRouter(tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def status() -> StatusResponse:
    return StatusResponse(status="ok")
