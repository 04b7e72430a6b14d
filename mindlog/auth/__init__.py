"""Authentication sessions for Mindlog."""

from .identity import IdentityVerifier, verified_profile
from .session import DEFAULT_SESSION_TTL, Session, SessionManager

__all__ = [
    "Session",
    "SessionManager",
    "DEFAULT_SESSION_TTL",
    "IdentityVerifier",
    "verified_profile",
]
