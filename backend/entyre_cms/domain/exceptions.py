# entyre_cms/domain/exceptions.py
from typing import List, Optional


class DomainError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[str]] = None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = list(details) if details else None

    def to_dict(self):
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        if self.message and self.message != self.error:
            body["message"] = self.message
        return body


class ValidationError(DomainError):
    status_code = 400
    error = "Validation failed"

    def __init__(self, details: List[str], message: Optional[str] = None):
        super().__init__(message, details=details)


class InvalidIdentifier(DomainError):
    status_code = 400
    error = "Invalid ID format"


class AuthFailure(DomainError):
    status_code = 401
    error = "Authentication failed"


class PermissionDenied(DomainError):
    status_code = 403
    error = "Insufficient permissions"


class NotFound(DomainError):
    status_code = 404
    error = "Resource not found"


class DuplicateKey(DomainError):
    status_code = 409
    error = "Duplicate entry"


class RateLimited(DomainError):
    status_code = 429
    error = "Too many requests"

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamFailure(DomainError):
    status_code = 502
    error = "Upstream service failure"
