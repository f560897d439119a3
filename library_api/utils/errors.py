"""Error types raised by repositories, decorators and routes.

Every error carries the HTTP status code it is rendered with, so route
handlers can let them propagate to the application error handler.
"""
from typing import Any, Dict, Optional


class LibraryError(Exception):
    """Base class for all library API errors."""

    status_code: int = 500
    default_message: str = 'Internal Server Error'

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {'success': False, 'message': self.message}


class ValidationError(LibraryError):
    """Malformed, missing or out-of-range input."""

    status_code = 400
    default_message = 'Invalid input'


class Unauthenticated(LibraryError):
    """Missing or invalid credentials."""

    status_code = 401
    default_message = 'Authentication required'


class InvalidTokenError(Unauthenticated):
    """Token signature does not verify or the token is malformed."""

    default_message = 'Invalid token'


class TokenExpiredError(Unauthenticated):
    """Token has elapsed its validity window."""

    default_message = 'Token has expired'


class Forbidden(LibraryError):
    """Valid identity without the required permission."""

    status_code = 403
    default_message = 'Forbidden'


class NotFound(LibraryError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(LibraryError):
    """Request conflicts with the current state of a resource."""

    status_code = 409
    default_message = 'Conflict'


class UniqueConstraintViolation(ConflictError):
    default_message = 'A record with the same unique value already exists'


class DeletionFailed(LibraryError):
    default_message = 'Deletion failed'


class InternalError(LibraryError):
    pass
