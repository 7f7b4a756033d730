"""
Error taxonomy for the Google sign-in flow.

Every stage of the pipeline raises one of these exceptions instead of a bare
library error. Each class carries the HTTP status and the fixed,
human-readable message the client receives; the underlying cause is kept on
``__cause__`` for logging only.
"""

from fastapi import status


class AuthError(Exception):
    """Base exception for authentication failures"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Google login failed"
    kind: str = "internal_error"

    def __init__(self, detail: str = ""):
        # detail is for logs; clients only ever see `message`
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class BadRequest(AuthError):
    """Token missing or empty; nothing was sent to Google."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Google token is required"
    kind = "bad_request"


class InvalidCredential(AuthError):
    """Google rejected the credential, or its signature/audience/expiry failed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid Google token"
    kind = "invalid_credential"


class ProviderUnavailable(AuthError):
    """Google could not be reached; the credential may still be valid."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unable to verify Google token"
    kind = "provider_unavailable"


class MalformedIdentity(AuthError):
    """A verified payload lacks `sub` or `email`."""

    kind = "malformed_identity"


class StorageFailure(AuthError):
    """Persistence error other than a lost creation race."""

    kind = "storage_failure"


class ConfigurationError(AuthError):
    kind = "configuration_error"


class InternalError(AuthError):
    kind = "internal_error"


class InvalidSession(AuthError):
    """Session JWT missing, malformed, expired, or for an unknown user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired session"
    kind = "invalid_session"


class EmailAlreadyRegistered(Exception):
    """Raised by direct registration when the email already has a record."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


__all__ = [
    "AuthError",
    "BadRequest",
    "InvalidCredential",
    "ProviderUnavailable",
    "MalformedIdentity",
    "StorageFailure",
    "ConfigurationError",
    "InternalError",
    "InvalidSession",
    "EmailAlreadyRegistered",
]
