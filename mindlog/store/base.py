"""Base interface for document stores.

This module defines the abstract interface every document store must
implement. A store holds three collections: logs, per-log comments and
per-user likes.
"""

from abc import ABC, abstractmethod
from typing import Any

from mindlog.schemas import CommentEntry, LikedLogEntry, LogRecord


class DocumentStore(ABC):
    """Abstract base class for document stores.

    Implementations raise ``BackendUnavailable`` when the underlying storage
    cannot be read or written. Reads of a missing document return None.
    """

    # Logs

    @abstractmethod
    def get_log(self, log_id: str) -> LogRecord | None:
        """Get a log by id.

        Args:
            log_id: Log identifier

        Returns:
            The log, or None if it does not exist
        """
        pass

    @abstractmethod
    def put_log(self, log: LogRecord) -> None:
        """Insert or replace a log.

        Args:
            log: Log to store under ``log.id``
        """
        pass

    @abstractmethod
    def delete_log(self, log_id: str) -> bool:
        """Delete a log together with its comments.

        Args:
            log_id: Log identifier

        Returns:
            True if the log existed
        """
        pass

    @abstractmethod
    def list_logs(
        self,
        owner_id: str | None = None,
        is_public: bool | None = None,
    ) -> list[LogRecord]:
        """List logs matching the given filters, in insertion order.

        Args:
            owner_id: Only logs created by this user
            is_public: Only logs with this visibility

        Returns:
            Matching logs
        """
        pass

    # Comments

    @abstractmethod
    def add_comment(self, comment: CommentEntry) -> None:
        """Store a comment under ``comment.log_id``."""
        pass

    @abstractmethod
    def get_comment(self, log_id: str, comment_id: str) -> CommentEntry | None:
        """Get a single comment, or None if it does not exist."""
        pass

    @abstractmethod
    def delete_comment(self, log_id: str, comment_id: str) -> bool:
        """Delete a comment. Returns True if it existed."""
        pass

    @abstractmethod
    def list_comments(self, log_id: str) -> list[CommentEntry]:
        """List all comments of a log, in insertion order."""
        pass

    # Likes

    @abstractmethod
    def get_like(self, user_id: str, log_id: str) -> LikedLogEntry | None:
        """Get a user's like on a log, or None."""
        pass

    @abstractmethod
    def put_like(self, user_id: str, like: LikedLogEntry) -> None:
        """Record that ``user_id`` likes ``like.log_id``."""
        pass

    @abstractmethod
    def delete_like(self, user_id: str, log_id: str) -> bool:
        """Remove a like. Returns True if it existed."""
        pass

    @abstractmethod
    def list_likes(self, user_id: str) -> list[LikedLogEntry]:
        """List a user's likes, in insertion order."""
        pass

    @abstractmethod
    def get_stats(self) -> dict[str, Any]:
        """Get document counts per collection.

        Returns:
            Dictionary with ``logs``, ``comments`` and ``likes`` counts
        """
        pass
