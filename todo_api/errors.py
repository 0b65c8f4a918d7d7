"""Application error taxonomy.

Every error raised by the services derives from ``AppError`` and carries the HTTP
status it maps to. The exception handler registered in ``main.create_app`` turns
them into ``{"detail": ...}`` JSON bodies; ``InternalError`` never exposes its
message to the client.
"""

from enum import Enum


class AuthFailure(str, Enum):
    """Why an authentication attempt was rejected. Logged, never sent to the client."""

    INVALID_SIGNATURE = "InvalidSignature"
    EXPIRED = "Expired"
    MALFORMED_CLAIMS = "MalformedClaims"
    INVALID_CREDENTIALS = "InvalidCredentials"
    MISSING_CREDENTIALS = "MissingCredentials"
    MALFORMED_HEADER = "MalformedHeader"
    UNKNOWN_SUBJECT = "UnknownSubject"


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_body(self) -> dict:
        return {"detail": self.detail}


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400
    default_detail = "Validation failed"

    def __init__(self, detail: str | None = None, errors: list[dict] | None = None) -> None:
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(errors=[{"field": field, "message": message}])

    def to_body(self) -> dict:
        return {"detail": self.detail, "errors": self.errors}


class HashingError(ValidationError):
    """The password hashing primitive rejected the input."""

    default_detail = "Password cannot be hashed"


class AuthError(AppError):
    """Missing, invalid or expired credentials.

    The client always sees the generic message for the failure class; ``reason``
    is kept for logging and tests.
    """

    status_code = 401
    default_detail = "Invalid or expired token"

    def __init__(self, reason: AuthFailure, detail: str | None = None) -> None:
        if detail is None and reason is AuthFailure.INVALID_CREDENTIALS:
            detail = "Invalid email or password"
        elif detail is None and reason is AuthFailure.MISSING_CREDENTIALS:
            detail = "Not authenticated"
        super().__init__(detail)
        self.reason = reason


class NotFoundError(AppError):
    """Resource absent or not owned by the caller."""

    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    """Uniqueness violation, e.g. an email that is already registered."""

    status_code = 400
    default_detail = "Conflict"


class InternalError(AppError):
    """Store failure or other unexpected condition. Message withheld from clients."""

    status_code = 500

    def to_body(self) -> dict:
        return {"detail": AppError.default_detail}
