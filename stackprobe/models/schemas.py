"""Response payloads for the public endpoints."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class StatusResponse(BaseSchema):
    status: str = "ok"


class HealthResponse(BaseSchema):
    status: str
    error: Optional[str] = None


class LastCallResponse(BaseSchema):
    ok: bool
    time: Any = None
    error: Optional[str] = None
