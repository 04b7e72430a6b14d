"""Error taxonomy for Mindlog.

Services raise these; the HTTP layer maps them to responses and the fetch
boundary turns backend failures into typed results before search runs.
"""

from typing import Any


class MindlogError(Exception):
    """Base exception for all Mindlog errors.

    Attributes:
        message: Human-readable error description
        kind: Machine-readable error kind
        details: Additional error context
    """

    kind = "generic"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for API responses."""
        payload: dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class BackendUnavailable(MindlogError):
    """The document store could not be reached or is misconfigured."""

    kind = "backend_unavailable"
    status_code = 503


class PermissionDenied(MindlogError):
    """The caller may not read or modify the requested record."""

    kind = "permission_denied"
    status_code = 403


class RecordNotFound(MindlogError):
    """A record with the requested id does not exist."""

    kind = "not_found"
    status_code = 404

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(
            f"{collection} record '{record_id}' not found",
            {"collection": collection, "id": record_id},
        )
        self.collection = collection
        self.record_id = record_id


class ValidationFailed(MindlogError):
    """Form input did not pass validation.

    Attributes:
        errors: Mapping of field name to the list of messages for that field
    """

    kind = "validation_failed"
    status_code = 422

    def __init__(self, errors: dict[str, list[str]], message: str = "Validation failed.") -> None:
        super().__init__(message, {"errors": errors})
        self.errors = errors


class NotAuthenticated(MindlogError):
    """No valid session was supplied."""

    kind = "not_authenticated"
    status_code = 401


class SessionExpired(NotAuthenticated):
    """The supplied session existed but is past its expiry time."""

    kind = "session_expired"
