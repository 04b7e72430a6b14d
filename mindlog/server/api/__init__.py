"""API module for the Mindlog server.

This module provides the request and response models for the API.
"""

from .models import (
    CommentListResponse,
    HealthResponse,
    LikeResponse,
    LogListResponse,
    LogResponse,
    SessionResponse,
    SignInRequest,
)

__all__ = [
    "SignInRequest",
    "SessionResponse",
    "LogListResponse",
    "LogResponse",
    "LikeResponse",
    "CommentListResponse",
    "HealthResponse",
]
