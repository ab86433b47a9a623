"""Error taxonomy shared by the record store, services and API layer.

Every error the core raises derives from ``PolicyServiceError`` and carries the
HTTP status the transport layer should answer with, so route handlers never
translate errors themselves.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class PolicyServiceError(Exception):
    """Base exception for the policy service."""

    status_code = 500
    code = "INTERNAL_ERROR"
    error = "Internal Server Error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        """Structured body rendered by the API exception handler."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": self.status_code,
            "error": self.error,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class PolicyNotFoundError(PolicyServiceError):
    """No policy matches the id or policy number, or the store is empty."""

    status_code = 404
    code = "NOT_FOUND"
    error = "Not Found"


class InvalidArgumentError(PolicyServiceError):
    """Malformed or contradictory input, rejected before any cache or store access."""

    status_code = 400
    code = "INVALID_ARGUMENT"
    error = "Bad Request"


class PolicyConflictError(PolicyServiceError):
    """The store rejected a write because the policy number is already taken."""

    status_code = 409
    code = "CONFLICT"
    error = "Conflict"


class StoreUnavailableError(PolicyServiceError):
    """The underlying store call failed. Not retried."""

    status_code = 503
    code = "STORE_UNAVAILABLE"
    error = "Service Unavailable"
