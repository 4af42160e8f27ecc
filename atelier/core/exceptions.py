"""Error taxonomy shared by services, dependencies and endpoints.

Each error carries the HTTP status it maps to and a single human readable
message, which is shown verbatim in the form's error slot.
"""
from fastapi import status

NOT_CONFIGURED_MESSAGE = "Supabase is not configured. Please update .env with valid credentials."


class AtelierError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BackendNotConfiguredError(AtelierError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = NOT_CONFIGURED_MESSAGE):
        super().__init__(message)


class AuthenticationError(AtelierError):
    """Bad credentials, duplicate registration, expired session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(AtelierError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AtelierError):
    status_code = status.HTTP_404_NOT_FOUND


class FormValidationError(AtelierError):
    """Client-side style validation failure; raised before any backend call."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class DuplicateSubmissionError(AtelierError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "This form is already being submitted."):
        super().__init__(message)


class BackendError(AtelierError):
    """The backend rejected a write; its message is passed through."""


def backend_message(exc: Exception) -> str:
    """Extract the backend's own message from a postgrest/auth exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__
