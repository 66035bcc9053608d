# cinema_api/users/service.py
import logging
from datetime import timedelta
from typing import Tuple

from .models import User, UserRegistration, validate_email, validate_password_plaintext, validate_user
from .passwords import hash_password, password_matches
from .storage_interfaces import AbstractUserStore
from ..errors import (
    FailedValidationError,
    InvalidCredentialsError,
    RecordNotFoundError,
    TokenExpiredError
)
from ..permissions.storage_interfaces import AbstractPermissionStore
from ..settings import settings
from ..tokens.models import Token, TokenScope
from ..tokens.service import TokenAuthority, validate_token_plaintext
from ..validator import Validator

logger = logging.getLogger(__name__)


class UserService:
    """
    Account workflows built on the user store, the permission store and the
    token authority: registration, activation and token issuance.
    """

    def __init__(
        self,
        user_store: AbstractUserStore,
        permission_store: AbstractPermissionStore,
        authority: TokenAuthority
    ):
        self.user_store = user_store
        self.permission_store = permission_store
        self.authority = authority

    async def register(self, registration: UserRegistration) -> Tuple[User, Token]:
        """
        Create an inactive account, grant the default permissions and mint
        its first activation token.

        Raises:
            FailedValidationError: On invalid fields or an email already in use.
        """
        user = User(name=registration.name or "", email=registration.email or "")

        v = Validator()
        validate_user(v, user, registration.password)
        v.raise_if_invalid()

        user = user.model_copy(update={"password_hash": hash_password(registration.password)})
        user = await self.user_store.insert(user)
        await self.permission_store.add_for_user(user.id, *settings.default_user_permissions)

        token = await self.authority.issue(
            user.id,
            timedelta(hours=settings.activation_token_ttl_hours),
            TokenScope.ACTIVATION
        )
        logger.info(f"Service: registered user {user.id}.")
        return user, token

    async def get_for_token(self, scope: TokenScope, token_plaintext: str) -> User:
        """Resolve the owner of a token in ``scope`` (see TokenAuthority.authenticate)."""
        user_id = await self.authority.authenticate(token_plaintext, scope)
        return await self.user_store.get(user_id)

    async def activate(self, token_plaintext: str) -> User:
        """
        Activate the account owning ``token_plaintext`` and consume every
        activation token it holds.

        Raises:
            FailedValidationError: If the token is malformed, unknown or expired.
            EditConflictError: If the account changed concurrently.
        """
        v = Validator()
        validate_token_plaintext(v, token_plaintext)
        v.raise_if_invalid()

        try:
            user = await self.get_for_token(TokenScope.ACTIVATION, token_plaintext)
        except (RecordNotFoundError, TokenExpiredError):
            v.add_error("token", "invalid or expired activation token")
            raise FailedValidationError(v.errors)

        user = await self.user_store.update(user.model_copy(update={"activated": True}))
        await self.authority.revoke_all(user.id, TokenScope.ACTIVATION)
        logger.info(f"Service: activated user {user.id}.")
        return user

    async def issue_activation_token(self, email: str) -> Tuple[User, Token]:
        """Re-issue an activation token for a not yet activated account."""
        v = Validator()
        validate_email(v, email)
        v.raise_if_invalid()

        try:
            user = await self.user_store.get_by_email(email)
        except RecordNotFoundError:
            v.add_error("email", "no matching email address found")
            raise FailedValidationError(v.errors)

        if user.activated:
            v.add_error("email", "user has already been activated")
            raise FailedValidationError(v.errors)

        token = await self.authority.reissue(
            user.id,
            timedelta(hours=settings.activation_token_ttl_hours),
            TokenScope.ACTIVATION
        )
        return user, token

    async def create_authentication_token(self, email: str, password: str) -> Token:
        """
        Exchange credentials for an authorization-scoped token, superseding
        the user's previous ones.

        Raises:
            FailedValidationError: If email or password are malformed.
            InvalidCredentialsError: If no user has that email or the password is wrong.
        """
        v = Validator()
        validate_email(v, email)
        validate_password_plaintext(v, password)
        v.raise_if_invalid()

        try:
            user = await self.user_store.get_by_email(email)
        except RecordNotFoundError:
            logger.warning("Service: authentication attempt for unknown email.")
            raise InvalidCredentialsError()

        if not password_matches(password, user.password_hash):
            logger.warning(f"Service: wrong password for user {user.id}.")
            raise InvalidCredentialsError()

        return await self.authority.reissue(
            user.id,
            timedelta(hours=settings.authentication_token_ttl_hours),
            TokenScope.AUTHORIZATION
        )
