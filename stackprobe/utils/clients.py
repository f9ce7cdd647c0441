"""FastAPI dependencies handing the shared clients to route handlers."""
from __future__ import annotations

from fastapi import Request

from ..cache import CacheClient
from ..database import DatabaseClient


def get_database(request: Request) -> DatabaseClient:
    return request.app.state.database


def get_cache(request: Request) -> CacheClient:
    return request.app.state.cache
