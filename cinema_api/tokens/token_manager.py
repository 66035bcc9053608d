# cinema_api/tokens/token_manager.py
import base64
import hashlib
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Tuple

from ..errors import TokenGenerationError

logger = logging.getLogger(__name__)

TOKEN_RANDOM_BYTES = 16
# 16 bytes base32-encoded without padding
TOKEN_PLAINTEXT_LENGTH = 26


class TokenManagerProtocol(ABC):
    """Protocol defining the interface for token generation and hashing."""

    @abstractmethod
    def generate_token_and_hash(self) -> Tuple[str, str]:
        """Generate a new token and return both the raw token and its hash."""
        pass

    @abstractmethod
    def hash_token(self, token: str) -> str:
        """Create a secure hash of the provided token."""
        pass


class DefaultTokenManager(TokenManagerProtocol):
    """Secure random tokens, base32-encoded, stored as SHA-256 digests."""

    def generate_token_and_hash(self) -> Tuple[str, str]:
        """
        Generate a cryptographically secure token and its corresponding hash.

        Returns:
            Tuple containing the raw token (for client use) and its hash (for storage).

        Raises:
            TokenGenerationError: If the operating system's CSPRNG is unavailable.
        """
        try:
            random_bytes = secrets.token_bytes(TOKEN_RANDOM_BYTES)
        except (OSError, NotImplementedError) as e:
            logger.error(f"Secure random source unavailable: {e}", exc_info=True)
            raise TokenGenerationError(f"secure random source unavailable: {e}") from e

        # Looks like Y3QMGX3PJ3WLRL2YRTQGQ6KRHU
        token = base64.b32encode(random_bytes).decode("ascii").rstrip("=")
        return token, self.hash_token(token)

    def hash_token(self, token: str) -> str:
        """
        Create SHA-256 hash of token for secure storage.

        Raw tokens should never be stored; only their hashes are persisted
        to prevent exposure in case of data breaches.
        """
        return hashlib.sha256(token.encode('utf-8')).hexdigest()
