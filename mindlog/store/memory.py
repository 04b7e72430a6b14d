"""In-memory document store.

Keeps all collections in dictionaries. Used for tests and for running the
server without persistence; the JSON-file store builds on it.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from mindlog.schemas import CommentEntry, LikedLogEntry, LogRecord

from .base import DocumentStore

_Snapshot = tuple[
    dict[str, LogRecord],
    dict[str, dict[str, CommentEntry]],
    dict[str, dict[str, LikedLogEntry]],
]


class InMemoryDocumentStore(DocumentStore):
    """Document store backed by plain dictionaries.

    Records are immutable pydantic models, so they are stored and returned
    as-is. A lock guards every access because FastAPI runs sync endpoints in
    a worker thread pool.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._logs: dict[str, LogRecord] = {}
        self._comments: dict[str, dict[str, CommentEntry]] = {}
        self._likes: dict[str, dict[str, LikedLogEntry]] = {}

    def _changed(self) -> None:
        """Hook called with the lock held after every write."""

    def _snapshot(self) -> _Snapshot:
        return (
            dict(self._logs),
            {log_id: dict(comments) for log_id, comments in self._comments.items()},
            {user_id: dict(likes) for user_id, likes in self._likes.items()},
        )

    @contextmanager
    def _write(self) -> Iterator[None]:
        """Apply a write and run the _changed hook.

        If the hook fails, the collections are restored to their state before
        the write and the error is re-raised.
        """
        with self._lock:
            snapshot = self._snapshot()
            yield
            try:
                self._changed()
            except Exception:
                self._logs, self._comments, self._likes = snapshot
                raise

    def get_log(self, log_id: str) -> LogRecord | None:
        with self._lock:
            return self._logs.get(log_id)

    def put_log(self, log: LogRecord) -> None:
        with self._write():
            self._logs[log.id] = log

    def delete_log(self, log_id: str) -> bool:
        with self._lock:
            if log_id not in self._logs:
                return False
            with self._write():
                del self._logs[log_id]
                self._comments.pop(log_id, None)
            return True

    def list_logs(
        self,
        owner_id: str | None = None,
        is_public: bool | None = None,
    ) -> list[LogRecord]:
        with self._lock:
            return [
                log
                for log in self._logs.values()
                if (owner_id is None or log.owner_id == owner_id)
                and (is_public is None or log.is_public == is_public)
            ]

    def add_comment(self, comment: CommentEntry) -> None:
        with self._write():
            self._comments.setdefault(comment.log_id, {})[comment.id] = comment

    def get_comment(self, log_id: str, comment_id: str) -> CommentEntry | None:
        with self._lock:
            return self._comments.get(log_id, {}).get(comment_id)

    def delete_comment(self, log_id: str, comment_id: str) -> bool:
        with self._lock:
            if comment_id not in self._comments.get(log_id, {}):
                return False
            with self._write():
                del self._comments[log_id][comment_id]
            return True

    def list_comments(self, log_id: str) -> list[CommentEntry]:
        with self._lock:
            return list(self._comments.get(log_id, {}).values())

    def get_like(self, user_id: str, log_id: str) -> LikedLogEntry | None:
        with self._lock:
            return self._likes.get(user_id, {}).get(log_id)

    def put_like(self, user_id: str, like: LikedLogEntry) -> None:
        with self._write():
            self._likes.setdefault(user_id, {})[like.log_id] = like

    def delete_like(self, user_id: str, log_id: str) -> bool:
        with self._lock:
            if log_id not in self._likes.get(user_id, {}):
                return False
            with self._write():
                del self._likes[user_id][log_id]
            return True

    def list_likes(self, user_id: str) -> list[LikedLogEntry]:
        with self._lock:
            return list(self._likes.get(user_id, {}).values())

    def get_stats(self) -> dict[str, Any]:
        """Return document counts per collection."""
        with self._lock:
            return {
                "logs": len(self._logs),
                "comments": sum(len(c) for c in self._comments.values()),
                "likes": sum(len(likes) for likes in self._likes.values()),
            }
