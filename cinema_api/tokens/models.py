# cinema_api/tokens/models.py
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TokenScope(str, Enum):
    """Purpose a token was minted for. A token only authenticates within its own scope."""
    ACTIVATION = "activation"
    AUTHORIZATION = "authorization"


class TokenData(BaseModel):
    """Internal model for a stored token row. The plaintext is never persisted."""
    hash: str  # SHA-256 hex digest of the plaintext
    user_id: int
    expiry: datetime
    scope: TokenScope


class Token(TokenData):
    """A freshly issued token. The only object that ever holds the plaintext."""
    plaintext: str = Field(description="Opaque bearer value shown to the caller exactly once.")

    def to_response(self) -> "TokenResponse":
        return TokenResponse(token=self.plaintext, expiry=self.expiry)


class TokenResponse(BaseModel):
    """Wire form of an issued token; hash, owner and scope stay server-side."""
    token: str = Field(description="The plaintext bearer token.")
    expiry: datetime = Field(description="Absolute UTC time after which the token is rejected.")
