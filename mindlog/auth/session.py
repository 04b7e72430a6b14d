"""
Explicit user sessions.

A Session is created when a user signs in and is handed to every request
handler that needs to know who the caller is. It stops being valid when
the user signs out or when it expires.
"""

import secrets
import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from mindlog.errors import NotAuthenticated, SessionExpired
from mindlog.schemas import UserProfile
from mindlog.schemas.log_record import utc_now
from mindlog.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=12)


class Session(BaseModel):
    """
    An authenticated user session.

    Attributes:
        token: Opaque bearer token identifying the session
        user: Profile of the signed-in user
        created_at: When the user signed in
        expires_at: When the session stops being valid
    """

    token: str = Field(..., min_length=1)
    user: UserProfile
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def uid(self) -> str:
        """UID of the signed-in user."""
        return self.user.uid

    @property
    def display_name(self) -> str:
        """Name shown next to the user's comments."""
        return self.user.display_name or "Anonymous User"

    def is_expired(self, now: datetime) -> bool:
        """Return True if the session is no longer valid at ``now``."""
        return now >= self.expires_at


class SessionManager:
    """
    Creates, looks up and invalidates sessions.

    Sessions live in process memory, so restarting the server signs every
    user out.

    Example:
        >>> manager = SessionManager()
        >>> session = manager.sign_in(UserProfile(uid="u1"))
        >>> manager.get(session.token).uid
        'u1'
        >>> manager.sign_out(session.token)
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the session manager.

        Args:
            ttl: How long a session stays valid after sign-in
            clock: Source of the current time
        """
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    def sign_in(self, user: UserProfile) -> Session:
        """
        Start a new session for a user verified by the identity provider.

        Args:
            user: The verified user profile

        Returns:
            The new session
        """
        now = self._clock()
        session = Session(
            token=secrets.token_urlsafe(32),
            user=user,
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._lock:
            self._sessions[session.token] = session

        logger.info("User signed in", extra={"context": {"uid": user.uid}})
        return session

    def get(self, token: str | None) -> Session:
        """
        Return the live session for a token.

        Args:
            token: Bearer token from the request

        Returns:
            The session

        Raises:
            NotAuthenticated: If no token was given or the token is unknown
            SessionExpired: If the session has expired; it is removed
        """
        if not token:
            raise NotAuthenticated("Sign in required")

        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                raise NotAuthenticated("Unknown or signed-out session")
            if session.is_expired(self._clock()):
                del self._sessions[token]
                logger.info("Session expired", extra={"context": {"uid": session.uid}})
                raise SessionExpired("Session expired, please sign in again")
            return session

    def sign_out(self, token: str) -> bool:
        """
        Invalidate a session.

        Args:
            token: Bearer token of the session

        Returns:
            True if a session was removed
        """
        with self._lock:
            session = self._sessions.pop(token, None)

        if session is not None:
            logger.info("User signed out", extra={"context": {"uid": session.uid}})
        return session is not None

    def purge_expired(self) -> int:
        """Drop all expired sessions and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
            for token in expired:
                del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        """Return the number of stored sessions."""
        with self._lock:
            return len(self._sessions)
