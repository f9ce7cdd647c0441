"""Error types raised by the backing-store clients and the readiness gate."""
from __future__ import annotations


class BackendError(Exception):
    """A call into the database or the cache failed."""


class DatabaseConnectionError(BackendError):
    pass


class QueryError(BackendError):
    pass


class CacheError(BackendError):
    pass


class DependencyUnavailable(Exception):
    """The backing stores never became reachable during startup."""


def describe(exc: BaseException) -> str:
    # SQLAlchemy wraps driver errors; the driver message is the useful part.
    orig = getattr(exc, "orig", None)
    message = str(orig if orig is not None else exc)
    return message or exc.__class__.__name__
