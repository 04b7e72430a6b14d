"""
Mindlog - notes linked into a mind map.

This package provides a JSON API and a library for keeping text-and-image
notes ("logs"), linking them to each other, commenting on and liking them,
and searching them by text and by link.

Main components:
- cli: Command-line interface
- core: Related-log search, related-title resolution, mind maps
- schemas: Data models for logs, comments, likes and forms
- store: Document store interface and implementations
- auth: Explicit user sessions
- services: Log, comment and like operations
- server: FastAPI application

Public API (for use as a library):
"""

__version__ = "0.1.0"

from mindlog.core import (  # noqa: E402
    build_mind_map,
    resolve_related_titles,
    search_logs,
    with_related_titles,
)
from mindlog.schemas import CommentEntry, LogRecord, UserProfile  # noqa: E402

__all__ = [
    # Schemas
    "LogRecord",
    "CommentEntry",
    "UserProfile",
    # Core
    "search_logs",
    "resolve_related_titles",
    "with_related_titles",
    "build_mind_map",
]
