# cinema_api/tokens/service.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .models import Token, TokenData, TokenScope
from .storage_interfaces import AbstractTokenStore
from .token_manager import DefaultTokenManager, TokenManagerProtocol, TOKEN_PLAINTEXT_LENGTH
from ..errors import RecordNotFoundError, TokenExpiredError
from ..validator import Validator

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_token_plaintext(v: Validator, token_plaintext: str) -> None:
    """Check that the plaintext token has been provided and is exactly 26 bytes long."""
    v.check(token_plaintext != "", "token", "must be provided")
    v.check(len(token_plaintext) == TOKEN_PLAINTEXT_LENGTH, "token", f"must be {TOKEN_PLAINTEXT_LENGTH} bytes long")


class TokenAuthority:
    """
    Issues, authenticates and revokes scoped bearer tokens.

    Only the digest of a token is stored and every lookup is done by digest,
    so the store never holds a usable secret. Lookups are always restricted
    to a scope: an activation token can never authenticate API calls and an
    authorization token can never activate an account.
    """

    def __init__(
        self,
        token_store: AbstractTokenStore,
        token_manager: Optional[TokenManagerProtocol] = None,
        clock: Clock = utc_now
    ):
        self.token_store = token_store
        self.token_manager = token_manager or DefaultTokenManager()
        self.clock = clock

    async def issue(
        self,
        user_id: int,
        ttl: timedelta,
        scope: TokenScope,
        timeout: Optional[float] = None
    ) -> Token:
        """
        Mint and persist a new token for ``user_id``.

        The returned Token is the only place the plaintext is observable.

        Raises:
            TokenGenerationError: If the secure random source fails.
            PersistenceError: If the token row cannot be stored.
            StorageTimeoutError: If storage exceeds its deadline.
        """
        plaintext, token_hash = self.token_manager.generate_token_and_hash()
        token = Token(
            plaintext=plaintext,
            hash=token_hash,
            user_id=user_id,
            expiry=self.clock() + ttl,
            scope=scope
        )
        await self.token_store.insert(
            TokenData(hash=token.hash, user_id=token.user_id, expiry=token.expiry, scope=token.scope),
            timeout=timeout
        )
        logger.info(f"Issued '{scope.value}' token for user {user_id}, expiring {token.expiry.isoformat()}.")
        return token

    async def reissue(
        self,
        user_id: int,
        ttl: timedelta,
        scope: TokenScope,
        timeout: Optional[float] = None
    ) -> Token:
        """Issue a token that supersedes every existing token of the same scope."""
        await self.revoke_all(user_id, scope, timeout=timeout)
        return await self.issue(user_id, ttl, scope, timeout=timeout)

    async def authenticate(
        self,
        plaintext: str,
        scope: TokenScope,
        timeout: Optional[float] = None
    ) -> int:
        """
        Resolve a caller-presented plaintext to the owning user id.

        Raises:
            FailedValidationError: If the plaintext is empty or the wrong length.
            RecordNotFoundError: If no token with that digest exists in ``scope``.
            TokenExpiredError: If the token's expiry is not after now.
        """
        v = Validator()
        validate_token_plaintext(v, plaintext)
        v.raise_if_invalid()

        token_hash = self.token_manager.hash_token(plaintext)
        token_data = await self.token_store.get_by_hash(token_hash, scope, timeout=timeout)
        if token_data is None:
            logger.warning(f"No '{scope.value}' token matches hash {token_hash[:10]}...")
            raise RecordNotFoundError()

        if token_data.expiry <= self.clock():
            logger.warning(f"'{scope.value}' token {token_hash[:10]}... for user {token_data.user_id} has expired.")
            raise TokenExpiredError()

        return token_data.user_id

    async def revoke_all(self, user_id: int, scope: TokenScope, timeout: Optional[float] = None) -> None:
        await self.token_store.delete_all_for_user(user_id, scope, timeout=timeout)
