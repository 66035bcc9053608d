# cinema_api/tokens/storage_interfaces.py
from abc import ABC, abstractmethod
from typing import Optional

from .models import TokenData, TokenScope


class AbstractTokenStore(ABC):
    """
    Abstract base class defining the interface for scoped token storage.

    Tokens are created once and never mutated; they are looked up by digest
    and removed in bulk per (user, scope).
    """

    @abstractmethod
    async def insert(self, token_data: TokenData, timeout: Optional[float] = None) -> None:
        """Persist a new token row."""
        pass

    @abstractmethod
    async def get_by_hash(
        self, token_hash: str, scope: TokenScope, timeout: Optional[float] = None
    ) -> Optional[TokenData]:
        """Retrieve a token by digest, restricted to one scope."""
        pass

    @abstractmethod
    async def delete_all_for_user(
        self, user_id: int, scope: TokenScope, timeout: Optional[float] = None
    ) -> int:
        """Remove every token of ``scope`` owned by ``user_id``; returns the number removed."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the storage system and prepare for operations."""
        pass

    @abstractmethod
    async def teardown(self) -> None:
        """Clean up resources and gracefully shutdown the storage system."""
        pass
