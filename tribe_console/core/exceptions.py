"""Custom exception classes for the tribe console."""

from fastapi import status


class TribeConsoleError(Exception):
    """Base exception for the tribe console."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(TribeConsoleError):
    """Raised when no caller identity was presented."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(TribeConsoleError):
    """Raised when the caller's role is not on the required access list."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(TribeConsoleError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(TribeConsoleError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(TribeConsoleError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST
