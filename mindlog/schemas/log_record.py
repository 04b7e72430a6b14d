"""
Data schemas for Mindlog records.

These models describe the documents kept in the document store: logs,
their comments, per-user likes and the authenticated user's profile.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class UserProfile(BaseModel):
    """
    Identity of a signed-in user, as verified by the identity provider.

    Attributes:
        uid: Stable user identifier
        email: Email address, if shared by the provider
        display_name: Human-readable name
        photo_url: Avatar URL
    """

    uid: str = Field(..., min_length=1, description="Stable user identifier")
    email: str | None = Field(default=None)
    display_name: str | None = Field(default=None)
    photo_url: str | None = Field(default=None)

    model_config = ConfigDict(frozen=True)


class ImageItem(BaseModel):
    """
    An image slot attached to a log.

    A slot may carry only a caption (``url`` is None) when the author wrote
    a caption without uploading the picture.
    """

    url: str | None = Field(default=None, description="Download URL of the stored image")
    is_main: bool = Field(default=False, description="Whether this is the log's main image")
    caption: str | None = Field(default=None, max_length=200)

    model_config = ConfigDict(frozen=True)


class LogRecord(BaseModel):
    """
    A user-authored note ("log") with links to other logs.

    ``related_log_titles`` is a best-effort cache filled in by whoever fetched
    the record. It normally runs parallel to ``related_log_ids`` but the two
    lists can differ in length when resolution partially failed, so readers
    must index it defensively.

    Attributes:
        id: Document identifier
        title: Display title
        description: Body text
        owner_id: UID of the author
        is_public: Whether the log is visible to everyone
        related_log_ids: Ids of linked logs, possibly dangling
        related_log_titles: Titles (or placeholders) of the linked logs
        image_urls: Attached images
        youtube_link: Optional video URL
        comment_count: Denormalized number of comments
        created_at: Creation time
        updated_at: Last modification time
    """

    id: str = Field(..., min_length=1)
    title: str = Field(default="")
    description: str | None = Field(default="")
    owner_id: str = Field(default="")
    is_public: bool = Field(default=False)
    related_log_ids: list[str] = Field(default_factory=list)
    related_log_titles: list[str] = Field(default_factory=list)
    image_urls: list[ImageItem] = Field(default_factory=list)
    youtube_link: str | None = Field(default=None)
    comment_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)

    def is_visible_to(self, uid: str | None) -> bool:
        """Return True if a user (or an anonymous caller when uid is None) may read this log."""
        return self.is_public or (uid is not None and uid == self.owner_id)


class CommentEntry(BaseModel):
    """A comment left on a log."""

    id: str = Field(..., min_length=1)
    log_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    user_name: str = Field(default="Anonymous User")
    content: str = Field(..., min_length=1, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)


class LikedLogEntry(BaseModel):
    """A like from one user on one log; keyed by (user, log_id) in the store."""

    log_id: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)
    log_title: str | None = Field(default=None)

    model_config = ConfigDict(frozen=True)
