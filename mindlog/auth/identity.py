"""
Identity provider boundary.

Sign-in never trusts a profile sent by the caller. The caller sends an ID
token issued by the identity provider, and a verifier configured on the
server turns that token into the verified user profile.
"""

from collections.abc import Callable

from mindlog.errors import NotAuthenticated
from mindlog.schemas import UserProfile
from mindlog.utils.logger import get_logger

logger = get_logger(__name__)

# Returns the verified profile for an ID token. Raises NotAuthenticated
# (or ValueError) when the token is invalid, expired or forged.
IdentityVerifier = Callable[[str], UserProfile]


def verified_profile(verifier: IdentityVerifier | None, id_token: str) -> UserProfile:
    """
    Verify an identity provider token.

    Args:
        verifier: Configured verifier, or None if the server has none
        id_token: Token presented by the caller

    Returns:
        The verified user profile

    Raises:
        NotAuthenticated: If no verifier is configured or the token is rejected
    """
    if verifier is None:
        raise NotAuthenticated("Sign-in is not configured on this server")

    try:
        return verifier(id_token)
    except NotAuthenticated:
        logger.warning("Identity token rejected")
        raise
    except ValueError as e:
        logger.warning(f"Identity token rejected: {e}")
        raise NotAuthenticated("Identity token rejected") from e
