"""Error taxonomy shared by the content and reference services.

Every error carries an HTTP status and a stable machine-readable code. The
Flask error handlers in :mod:`hashvault.app` turn them into the standard
response envelope.
"""
from typing import Any, Optional


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = 'SERVER_ERROR'
    default_message = 'Internal Server Error'

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def __repr__(self):
        return f"<{type(self).__name__}(status={self.status_code}, message='{self.message}')>"


class BadRequestError(ApiError):
    """Malformed identifier, hash or name, or a missing required field."""
    status_code = 400
    code = 'BAD_REQUEST'
    default_message = 'Bad Request'


class UnauthorizedError(ApiError):
    """Missing or invalid identity token."""
    status_code = 401
    code = 'UNAUTHORIZED'
    default_message = 'Unauthorized'


class ForbiddenError(ApiError):
    """Authenticated, but without the required repository permission."""
    status_code = 403
    code = 'FORBIDDEN'
    default_message = 'Forbidden'


class NotFoundError(ApiError):
    """Repository, object or reference absent."""
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'Resource Not Found'


class ConflictError(ApiError):
    """Duplicate tag name or other uniqueness violation."""
    status_code = 409
    code = 'CONFLICT'
    default_message = 'Conflict'


class InternalServerError(ApiError):
    """Collaborator unreachable, storage I/O failure or missing configuration."""
    status_code = 500
    code = 'SERVER_ERROR'
    default_message = 'Internal Server Error'
