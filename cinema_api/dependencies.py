# cinema_api/dependencies.py
import logging
from typing import Annotated, Callable, Coroutine, Any, Optional

from fastapi import Depends, Header

from .errors import (
    AuthenticationRequiredError,
    InactiveAccountError,
    InvalidAuthenticationTokenError,
    NotPermittedError,
    RecordNotFoundError
)
from .permissions.models import require
from .permissions.sqlite_permission_store import get_sqlite_permission_store
from .permissions.storage_interfaces import AbstractPermissionStore
from .tokens.models import TokenScope
from .tokens.service import TokenAuthority, validate_token_plaintext
from .tokens.sqlite_token_store import get_sqlite_token_store
from .tokens.storage_interfaces import AbstractTokenStore
from .users.models import ANONYMOUS_USER, User
from .users.service import UserService
from .users.sqlite_user_store import get_sqlite_user_store
from .users.storage_interfaces import AbstractUserStore
from .validator import Validator

logger = logging.getLogger(__name__)


async def get_token_authority(
    token_store: Annotated[AbstractTokenStore, Depends(get_sqlite_token_store)]
) -> TokenAuthority:
    """Dependency provider for the token authority."""
    return TokenAuthority(token_store)


async def get_user_service(
    user_store: Annotated[AbstractUserStore, Depends(get_sqlite_user_store)],
    permission_store: Annotated[AbstractPermissionStore, Depends(get_sqlite_permission_store)],
    authority: Annotated[TokenAuthority, Depends(get_token_authority)]
) -> UserService:
    """Factory function to create UserService with injected store dependencies."""
    return UserService(user_store, permission_store, authority)


async def get_current_user(
    user_service: Annotated[UserService, Depends(get_user_service)],
    authorization: Annotated[Optional[str], Header()] = None
) -> User:
    """
    Resolve the principal for this request from its Bearer token.

    No Authorization header means the anonymous user. A header that is
    present but malformed, unknown or expired is rejected with 401.
    """
    if not authorization:
        return ANONYMOUS_USER

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        logger.warning("Auth: Authorization header is not a Bearer token.")
        raise InvalidAuthenticationTokenError()

    v = Validator()
    validate_token_plaintext(v, token)
    if not v.valid():
        logger.warning("Auth: malformed bearer token.")
        raise InvalidAuthenticationTokenError()

    try:
        user = await user_service.get_for_token(TokenScope.AUTHORIZATION, token)
    except RecordNotFoundError:
        raise InvalidAuthenticationTokenError()

    logger.debug(f"Auth: request authenticated as user {user.id}.")
    return user


async def require_authenticated_user(
    user: Annotated[User, Depends(get_current_user)]
) -> User:
    if user.is_anonymous:
        raise AuthenticationRequiredError()
    return user


async def require_activated_user(
    user: Annotated[User, Depends(require_authenticated_user)]
) -> User:
    if not user.activated:
        raise InactiveAccountError()
    return user


def require_permission(code: str) -> Callable[..., Coroutine[Any, Any, User]]:
    """
    Build a dependency that lets the request through only when the activated
    user currently holds ``code``. Permissions are fetched on every call so
    grant changes apply immediately.
    """

    async def permission_dependency(
        user: Annotated[User, Depends(require_activated_user)],
        permission_store: Annotated[AbstractPermissionStore, Depends(get_sqlite_permission_store)]
    ) -> User:
        permissions = await permission_store.get_all_for_user(user.id)
        if not require(permissions, code):
            logger.warning(f"Auth: user {user.id} lacks '{code}'.")
            raise NotPermittedError()
        return user

    return permission_dependency
