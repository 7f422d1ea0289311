"""Domain errors raised by the auth, authorization and cart services.

Each error carries the HTTP status and a user-facing message. The API layer
renders them through a single exception handler registered in ``src.main``.
"""

from collections.abc import Iterable


class AuthError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code: int = 400
    code: str = "error"
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(AuthError):
    status_code = 401
    code = "unauthenticated"
    default_detail = "You must be logged in to do that"


class InvalidToken(AuthError):
    status_code = 401
    code = "invalid_token"
    default_detail = "Invalid session token"


class Forbidden(AuthError):
    """Authenticated, but lacking the permission or ownership required."""

    status_code = 403
    code = "forbidden"
    default_detail = "You do not have permission to do that"

    def __init__(self, detail: str | None = None, required: Iterable[str] = ()) -> None:
        self.required = sorted(str(p) for p in required)
        if detail is None and self.required:
            detail = f"You do not have sufficient permissions: {', '.join(self.required)}"
        super().__init__(detail)


class NotFound(AuthError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class InvalidCredentials(AuthError):
    status_code = 401
    code = "invalid_credentials"
    default_detail = "Invalid email or password"


class PasswordMismatch(AuthError):
    status_code = 400
    code = "password_mismatch"
    default_detail = "Your passwords don't match"


class InvalidOrExpiredToken(AuthError):
    status_code = 400
    code = "invalid_reset_token"
    default_detail = "This reset token is either invalid or expired"


class EmailAlreadyRegistered(AuthError):
    status_code = 409
    code = "email_taken"
    default_detail = "Email already registered"
