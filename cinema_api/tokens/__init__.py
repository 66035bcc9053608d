# cinema_api/tokens/__init__.py
"""
Scoped bearer token module initialization.

Token generation and hashing, the storage abstraction with its SQLite
implementation, and the TokenAuthority service that ties them together.
"""

from .models import TokenScope, TokenData, Token, TokenResponse
from .token_manager import TokenManagerProtocol, DefaultTokenManager, TOKEN_PLAINTEXT_LENGTH
from .storage_interfaces import AbstractTokenStore
from .sqlite_token_store import SQLiteTokenStore, get_sqlite_token_store
from .service import TokenAuthority, validate_token_plaintext, utc_now

__all__ = [
    # Data models
    "TokenScope",
    "TokenData",
    "Token",
    "TokenResponse",

    # Generation and hashing
    "TokenManagerProtocol",
    "DefaultTokenManager",
    "TOKEN_PLAINTEXT_LENGTH",

    # Storage
    "AbstractTokenStore",
    "SQLiteTokenStore",
    "get_sqlite_token_store",

    # Service
    "TokenAuthority",
    "validate_token_plaintext",
    "utc_now"
]
