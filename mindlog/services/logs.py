"""
Log service.

Implements the operations behind the Mindlog pages and forms: creating and
editing logs, visibility checks, likes, comments and the private and
public searches. Every operation that depends on the caller's identity
takes the caller's Session explicitly.
"""

import uuid
from collections.abc import Callable
from datetime import datetime

from mindlog.auth import Session
from mindlog.core import MindMap, build_mind_map, search_logs, with_related_titles
from mindlog.core.related import LogLookup
from mindlog.errors import PermissionDenied, RecordNotFound
from mindlog.schemas import CommentEntry, CommentForm, LikedLogEntry, LogForm, LogRecord
from mindlog.schemas.log_record import utc_now
from mindlog.store import DocumentStore, FetchOk, FetchResult, fetch_records
from mindlog.utils.logger import get_logger

logger = get_logger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class LogService:
    """
    Operations on logs, comments and likes.

    Attributes:
        store: Document store holding all records
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        """
        Initialize the service.

        Args:
            store: Document store
            clock: Source of the current time
            id_factory: Generator for new document ids
        """
        self.store = store
        self._clock = clock
        self._new_id = id_factory

    # Lookups

    def _lookup_for(self, uid: str | None) -> LogLookup:
        """Build a related-log lookup that honours the viewer's visibility."""

        def lookup(log_id: str) -> LogRecord | None:
            log = self.store.get_log(log_id)
            if log is not None and not log.is_visible_to(uid):
                raise PermissionDenied(f"Log '{log_id}' is private")
            return log

        return lookup

    def _require_log(self, log_id: str) -> LogRecord:
        log = self.store.get_log(log_id)
        if log is None:
            raise RecordNotFound("logs", log_id)
        return log

    def _require_visible(self, session: Session | None, log_id: str) -> LogRecord:
        log = self._require_log(log_id)
        if not log.is_visible_to(session.uid if session else None):
            raise PermissionDenied(f"Log '{log_id}' is private")
        return log

    def _require_owned(self, session: Session, log_id: str) -> LogRecord:
        log = self._require_log(log_id)
        if log.owner_id != session.uid:
            raise PermissionDenied(f"Only the owner can modify log '{log_id}'")
        return log

    def _resolve(self, logs: list[LogRecord], uid: str | None) -> list[LogRecord]:
        lookup = self._lookup_for(uid)
        return [with_related_titles(log, lookup) for log in logs]

    # Logs

    def create_log(self, session: Session, form: LogForm) -> LogRecord:
        """
        Create a log owned by the signed-in user.

        Args:
            session: Caller's session
            form: Validated log form

        Returns:
            The stored log
        """
        images = form.build_images()
        now = self._clock()
        log = LogRecord(
            id=self._new_id(),
            title=form.title,
            description=form.description,
            owner_id=session.uid,
            is_public=form.is_public,
            related_log_ids=form.related_log_ids,
            image_urls=images,
            youtube_link=form.youtube_link,
            created_at=now,
            updated_at=now,
        )
        log = with_related_titles(log, self._lookup_for(session.uid))
        self.store.put_log(log)

        logger.info(
            "Log created",
            extra={"context": {"log_id": log.id, "owner_id": session.uid}},
        )
        return log

    def update_log(self, session: Session, log_id: str, form: LogForm) -> LogRecord:
        """
        Replace the editable fields of a log.

        Args:
            session: Caller's session
            log_id: Log to edit
            form: Validated log form

        Returns:
            The updated log

        Raises:
            RecordNotFound: If the log does not exist
            PermissionDenied: If the caller does not own the log
        """
        existing = self._require_owned(session, log_id)
        images = form.build_images()
        # A log cannot link to itself
        related_ids = [rid for rid in form.related_log_ids if rid != log_id]

        updated = existing.model_copy(
            update={
                "title": form.title,
                "description": form.description,
                "is_public": form.is_public,
                "related_log_ids": related_ids,
                "image_urls": images,
                "youtube_link": form.youtube_link,
                "updated_at": self._clock(),
            }
        )
        updated = with_related_titles(updated, self._lookup_for(session.uid))
        self.store.put_log(updated)

        logger.info("Log updated", extra={"context": {"log_id": log_id}})
        return updated

    def delete_log(self, session: Session, log_id: str) -> None:
        """
        Delete a log and its comments.

        Raises:
            RecordNotFound: If the log does not exist
            PermissionDenied: If the caller does not own the log
        """
        self._require_owned(session, log_id)
        self.store.delete_log(log_id)
        logger.info("Log deleted", extra={"context": {"log_id": log_id}})

    def get_log(self, session: Session | None, log_id: str) -> LogRecord:
        """
        Read a log with its related titles resolved for the caller.

        Args:
            session: Caller's session, or None for anonymous access
            log_id: Log id

        Raises:
            RecordNotFound: If the log does not exist
            PermissionDenied: If the log is private and not the caller's
        """
        log = self._require_visible(session, log_id)
        return with_related_titles(log, self._lookup_for(session.uid if session else None))

    def list_own_logs(self, session: Session) -> list[LogRecord]:
        """Return the caller's logs, most recently updated first."""
        logs = self.store.list_logs(owner_id=session.uid)
        logs.sort(key=lambda log: log.updated_at, reverse=True)
        return self._resolve(logs, session.uid)

    def list_public_logs(self, session: Session | None = None) -> list[LogRecord]:
        """Return all public logs, newest first."""
        logs = self.store.list_logs(is_public=True)
        logs.sort(key=lambda log: log.created_at, reverse=True)
        return self._resolve(logs, session.uid if session else None)

    def fetch_own_logs(self, session: Session) -> FetchResult:
        """Like list_own_logs, but reports backend failures as a FetchError."""
        return fetch_records(lambda: self.list_own_logs(session))

    def fetch_public_logs(self, session: Session | None = None) -> FetchResult:
        """Like list_public_logs, but reports backend failures as a FetchError."""
        return fetch_records(lambda: self.list_public_logs(session))

    # Likes

    def toggle_like(self, session: Session, log_id: str) -> bool:
        """
        Like a log, or remove the like if it is already liked.

        Returns:
            True if the log is liked after the call

        Raises:
            RecordNotFound: If the log does not exist
            PermissionDenied: If the log is not visible to the caller
        """
        log = self._require_visible(session, log_id)
        if self.store.get_like(session.uid, log_id) is not None:
            self.store.delete_like(session.uid, log_id)
            return False

        self.store.put_like(
            session.uid,
            LikedLogEntry(log_id=log_id, created_at=self._clock(), log_title=log.title),
        )
        return True

    def is_liked(self, session: Session, log_id: str) -> bool:
        """Return True if the caller likes the log."""
        return self.store.get_like(session.uid, log_id) is not None

    def list_liked_logs(self, session: Session) -> list[LogRecord]:
        """Return the logs the caller likes that still exist and are visible."""
        logs: list[LogRecord] = []
        for like in self.store.list_likes(session.uid):
            log = self.store.get_log(like.log_id)
            if log is not None and log.is_visible_to(session.uid):
                logs.append(log)
        return self._resolve(logs, session.uid)

    # Comments

    def add_comment(self, session: Session, log_id: str, form: CommentForm) -> CommentEntry:
        """
        Comment on a visible log and bump its comment count.

        Raises:
            RecordNotFound: If the log does not exist
            PermissionDenied: If the log is not visible to the caller
        """
        log = self._require_visible(session, log_id)
        comment = CommentEntry(
            id=self._new_id(),
            log_id=log_id,
            user_id=session.uid,
            user_name=session.display_name,
            content=form.content,
            created_at=self._clock(),
        )
        self.store.add_comment(comment)
        self.store.put_log(log.model_copy(update={"comment_count": log.comment_count + 1}))
        return comment

    def list_comments(self, session: Session | None, log_id: str) -> list[CommentEntry]:
        """Return the comments of a visible log, newest first."""
        self._require_visible(session, log_id)
        comments = self.store.list_comments(log_id)
        comments.sort(key=lambda comment: comment.created_at, reverse=True)
        return comments

    def delete_comment(self, session: Session, log_id: str, comment_id: str) -> None:
        """
        Delete a comment. Allowed for the comment's author and the log's owner.

        Raises:
            RecordNotFound: If the log or comment does not exist
            PermissionDenied: If the caller is neither author nor owner
        """
        log = self._require_log(log_id)
        comment = self.store.get_comment(log_id, comment_id)
        if comment is None:
            raise RecordNotFound("comments", comment_id)
        if session.uid not in (comment.user_id, log.owner_id):
            raise PermissionDenied("Only the author or the log owner can delete a comment")

        self.store.delete_comment(log_id, comment_id)
        self.store.put_log(
            log.model_copy(update={"comment_count": max(log.comment_count - 1, 0)})
        )

    # Search

    def _private_search_set(self, session: Session) -> list[LogRecord]:
        merged: dict[str, LogRecord] = {}
        for log in self.store.list_logs(owner_id=session.uid):
            merged[log.id] = log
        for like in self.store.list_likes(session.uid):
            log = self.store.get_log(like.log_id)
            if log is not None and log.is_visible_to(session.uid):
                merged[log.id] = log

        logs = sorted(merged.values(), key=lambda log: log.updated_at, reverse=True)
        return self._resolve(logs, session.uid)

    def search_private(self, session: Session, query: str) -> FetchResult:
        """
        Search the caller's own and liked logs.

        Args:
            session: Caller's session
            query: Search text

        Returns:
            FetchOk with the matching logs, or the FetchError that prevented the search
        """
        fetched = fetch_records(lambda: self._private_search_set(session))
        if not isinstance(fetched, FetchOk):
            return fetched
        return FetchOk(records=search_logs(query, fetched.records))

    def search_public(self, query: str, session: Session | None = None) -> FetchResult:
        """
        Search all public logs.

        Returns:
            FetchOk with the matching logs, or the FetchError that prevented the search
        """
        fetched = self.fetch_public_logs(session)
        if not isinstance(fetched, FetchOk):
            return fetched
        return FetchOk(records=search_logs(query, fetched.records))

    # Mind map

    def mind_map(self, session: Session | None, log_id: str) -> MindMap:
        """
        Build the mind map around a visible log.

        Linked logs the caller cannot see are shown by their placeholder title.
        """
        root = self.get_log(session, log_id)
        uid = session.uid if session else None

        neighbours: dict[str, LogRecord] = {}
        for related_id in root.related_log_ids:
            related = self.store.get_log(related_id)
            if related is not None and related.is_visible_to(uid):
                neighbours[related_id] = related

        return build_mind_map(root, neighbours)
