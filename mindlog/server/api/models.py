"""Pydantic models for API requests and responses.

This module defines the data models used by the server API. Request bodies
for logs and comments are the form models from ``mindlog.schemas``.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from mindlog.schemas import CommentEntry, LogRecord, UserProfile


class SignInRequest(BaseModel):
    """Sign-in request carrying the identity provider's ID token."""

    id_token: str = Field(..., min_length=1, description="ID token issued by the identity provider")


class SessionResponse(BaseModel):
    """Response returned after signing in.

    Attributes:
        token: Bearer token to send in the Authorization header
        user: Signed-in user
        expires_at: When the session expires
    """

    token: str = Field(description="Bearer token")
    user: UserProfile = Field(description="Signed-in user")
    expires_at: datetime = Field(description="Session expiry time")


class LogListResponse(BaseModel):
    """A list of logs.

    Attributes:
        logs: The logs
        total_found: Number of logs returned
        query: Search query that produced the list, if any
    """

    logs: list[LogRecord] = Field(default_factory=list)
    total_found: int = Field(description="Number of logs returned", ge=0)
    query: str | None = Field(default=None, description="Search query, if any")


class LogResponse(BaseModel):
    """A single log with the caller's like state."""

    log: LogRecord
    liked: bool = Field(default=False, description="Whether the caller likes this log")
    youtube_embed_url: str | None = Field(default=None, description="Embeddable video URL")


class LikeResponse(BaseModel):
    """Like state after toggling."""

    log_id: str
    liked: bool


class CommentListResponse(BaseModel):
    """Comments of a log, newest first."""

    comments: list[CommentEntry] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response.

    Attributes:
        status: Service status (ok, error)
        store: Document store type
        logs: Number of stored logs
    """

    status: str = Field(description="Service status (ok, error)")
    store: str = Field(description="Document store type")
    logs: int = Field(default=0, description="Number of stored logs", ge=0)
