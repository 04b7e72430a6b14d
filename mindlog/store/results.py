"""Typed results for data fetches.

Fetch boundaries return either the fetched records or an error value, so
that callers handle backend failures before any records reach the search.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from mindlog.errors import BackendUnavailable, MindlogError, PermissionDenied
from mindlog.schemas import LogRecord
from mindlog.utils.logger import get_logger

logger = get_logger(__name__)

FetchErrorKind = Literal["backend_unavailable", "permission_denied", "generic"]


@dataclass(frozen=True)
class FetchOk:
    """Records fetched successfully."""

    records: list[LogRecord] = field(default_factory=list)
    ok: Literal[True] = True


@dataclass(frozen=True)
class FetchError:
    """A failed fetch.

    Attributes:
        message: Human-readable description
        kind: Error category
    """

    message: str
    kind: FetchErrorKind = "generic"
    ok: Literal[False] = False

    def to_exception(self) -> MindlogError:
        """Convert back into the matching exception."""
        if self.kind == "backend_unavailable":
            return BackendUnavailable(self.message)
        if self.kind == "permission_denied":
            return PermissionDenied(self.message)
        return MindlogError(self.message)


FetchResult = FetchOk | FetchError


def fetch_records(fetch: Callable[[], list[LogRecord]]) -> FetchResult:
    """
    Run a fetch and capture backend failures as a FetchError.

    Args:
        fetch: Callable returning the records

    Returns:
        FetchOk with the records, or FetchError describing the failure
    """
    try:
        return FetchOk(records=fetch())
    except BackendUnavailable as e:
        logger.error(f"Backend unavailable: {e.message}")
        return FetchError(message=e.message, kind="backend_unavailable")
    except PermissionDenied as e:
        logger.warning(f"Permission denied: {e.message}")
        return FetchError(message=e.message, kind="permission_denied")
    except MindlogError as e:
        logger.error(f"Fetch failed: {e.message}")
        return FetchError(message=e.message, kind="generic")
