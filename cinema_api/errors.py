# cinema_api/errors.py
from enum import Enum
from typing import Dict, Optional

from fastapi import HTTPException, status


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced to callers of the stores and services."""
    NOT_FOUND = "not_found"
    EDIT_CONFLICT = "edit_conflict"
    VALIDATION_FAILED = "validation_failed"
    UNAUTHORIZED = "unauthorized"
    TOKEN_EXPIRED = "token_expired"
    FORBIDDEN = "forbidden"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class APIError(HTTPException):
    """
    Base class for every error raised by the stores, services and dependencies.

    Each subclass fixes its ``kind`` and HTTP status so callers can branch on
    ``err.kind`` without comparing message text, and FastAPI can render the
    error directly because it is an ``HTTPException``.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_detail: str = "the server encountered a problem and could not process your request"

    def __init__(
        self,
        status_code: int,
        detail: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.message = detail or self.default_detail
        super().__init__(status_code=status_code, detail={"error": self.message}, headers=headers)

    def __str__(self) -> str:
        return self.message


class RecordNotFoundError(APIError):
    """The requested movie, user or token does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_detail = "the requested resource could not be found"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class EditConflictError(APIError):
    """
    A versioned write matched zero rows.

    Either another writer bumped the version first or the record was deleted
    in between; the caller decides whether to re-fetch and retry.
    """

    kind = ErrorKind.EDIT_CONFLICT
    default_detail = "unable to update the record due to an edit conflict, please try again"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class FailedValidationError(APIError):
    """Carries the full field -> message map accumulated by a Validator."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        HTTPException.__init__(
            self,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": self.errors}
        )
        self.message = "; ".join(f"{key}: {msg}" for key, msg in self.errors.items())


class DuplicateEmailError(FailedValidationError):
    def __init__(self):
        super().__init__({"email": "a user with this email address already exists"})


class UnauthorizedError(APIError):
    """Base for 401 responses; always advertises the Bearer scheme."""

    kind = ErrorKind.UNAUTHORIZED
    default_detail = "you must be authenticated to access this resource"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthenticationRequiredError(UnauthorizedError):
    default_detail = "you must be authenticated to access this resource"


class InvalidAuthenticationTokenError(UnauthorizedError):
    default_detail = "invalid or missing authentication token"


class InvalidCredentialsError(UnauthorizedError):
    default_detail = "invalid authentication credentials"


class TokenExpiredError(UnauthorizedError):
    """The token exists for the requested scope but its expiry has passed."""

    kind = ErrorKind.TOKEN_EXPIRED
    default_detail = "the token has expired"


class ForbiddenError(APIError):
    kind = ErrorKind.FORBIDDEN
    default_detail = "you are not allowed to access this resource"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InactiveAccountError(ForbiddenError):
    default_detail = "your user account must be activated to access this resource"


class NotPermittedError(ForbiddenError):
    default_detail = "your user account doesn't have the necessary permissions to access this resource"


class StorageTimeoutError(APIError):
    """A storage call ran past its deadline. Writes may or may not have applied."""

    kind = ErrorKind.TIMEOUT
    default_detail = "the storage operation timed out, please try again"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=detail)


class InternalError(APIError):
    """Server-side fault. ``detail`` is kept for logs; clients only see the generic message."""

    kind = ErrorKind.INTERNAL

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.message = detail or self.default_detail


class PersistenceError(InternalError):
    """Unexpected storage fault (constraint violation, broken connection, bad SQL)."""


class TokenGenerationError(InternalError):
    """The secure random source could not produce token bytes."""
