# cinema_api/users/__init__.py
"""
User account module initialization.

Account models and validation, password hashing, the storage layer and the
UserService that drives registration, activation and token issuance.
"""

from .models import (
    User,
    ANONYMOUS_USER,
    UserRegistration,
    ActivationRequest,
    ActivationTokenRequest,
    AuthenticationRequest,
    UserEnvelope,
    TokenEnvelope,
    MessageEnvelope,
    validate_email,
    validate_password_plaintext,
    validate_user
)
from .passwords import hash_password, password_matches
from .storage_interfaces import AbstractUserStore
from .sqlite_user_store import SQLiteUserStore, get_sqlite_user_store
from .service import UserService

__all__ = [
    # Data models
    "User",
    "ANONYMOUS_USER",
    "UserRegistration",
    "ActivationRequest",
    "ActivationTokenRequest",
    "AuthenticationRequest",
    "UserEnvelope",
    "TokenEnvelope",
    "MessageEnvelope",
    "validate_email",
    "validate_password_plaintext",
    "validate_user",
    # Passwords
    "hash_password",
    "password_matches",
    # Storage
    "AbstractUserStore",
    "SQLiteUserStore",
    "get_sqlite_user_store",
    # Service
    "UserService"
]
