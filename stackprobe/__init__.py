"""Status, health and last-call API in front of PostgreSQL and Redis."""

__version__ = "1.0.0"
