"""Application services for Mindlog."""

from .logs import LogService

__all__ = [
    "LogService",
]
