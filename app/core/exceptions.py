"""
Typed service errors.

Every failure raised by the services is one of these, so the HTTP layer can
pick the response category from the type alone.
"""
from typing import Dict, Optional
from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """Base class for errors raised by the service layer."""
    error = "Error"

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(ServiceError):
    """Missing, malformed or out-of-range input."""
    error = "Validation Error"

    def __init__(self, detail: str = "Invalid request data"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(ServiceError):
    """Uniqueness or state conflict."""
    error = "Conflict"

    def __init__(self, detail: str = "Request conflicts with current state"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationError(ServiceError):
    """Missing or invalid credential, or a failed login."""
    error = "Unauthorized"

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(ServiceError):
    """Authenticated but not permitted."""
    error = "Forbidden"

    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""
    error = "Not Found"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
