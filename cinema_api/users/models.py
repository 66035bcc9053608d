# cinema_api/users/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..tokens.models import TokenResponse
from ..validator import EMAIL_RX, Validator, matches


class User(BaseModel):
    """A user account. ``password_hash`` never leaves the server."""

    id: int = 0
    created_at: Optional[datetime] = None
    name: str = ""
    email: str = ""
    password_hash: bytes = Field(default=b"", exclude=True)
    activated: bool = False
    version: int = 0

    @property
    def is_anonymous(self) -> bool:
        return self is ANONYMOUS_USER


# Principal attached to requests that carry no Authorization header
ANONYMOUS_USER = User()


class UserRegistration(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ActivationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    token: Optional[str] = None


class ActivationTokenRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    email: Optional[str] = None


class AuthenticationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    email: Optional[str] = None
    password: Optional[str] = None


class UserEnvelope(BaseModel):
    user: User


class TokenEnvelope(BaseModel):
    authentication_token: TokenResponse


class MessageEnvelope(BaseModel):
    message: str


def validate_email(v: Validator, email: str) -> None:
    v.check(email != "", "email", "must be provided")
    v.check(matches(email, EMAIL_RX), "email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: str) -> None:
    v.check(password != "", "password", "must be provided")
    v.check(len(password.encode("utf-8")) >= 8, "password", "must be at least 8 bytes long")
    v.check(len(password.encode("utf-8")) <= 72, "password", "must not be more than 72 bytes long")


def validate_user(v: Validator, user: User, password_plaintext: Optional[str]) -> None:
    v.check(user.name != "", "name", "must be provided")
    v.check(len(user.name.encode("utf-8")) <= 500, "name", "must not be more than 500 bytes long")

    validate_email(v, user.email)

    if password_plaintext is not None:
        validate_password_plaintext(v, password_plaintext)
    else:
        v.check(False, "password", "must be provided")
