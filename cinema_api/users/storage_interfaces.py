# cinema_api/users/storage_interfaces.py
from abc import ABC, abstractmethod
from typing import Optional

from .models import User


class AbstractUserStore(ABC):
    """
    Abstract base class defining the interface for user account storage.

    Updates follow the same optimistic-concurrency protocol as movies.
    """

    @abstractmethod
    async def insert(self, user: User, timeout: Optional[float] = None) -> User:
        """Store a new user; raises DuplicateEmailError if the email is taken."""
        pass

    @abstractmethod
    async def get(self, user_id: int, timeout: Optional[float] = None) -> User:
        pass

    @abstractmethod
    async def get_by_email(self, email: str, timeout: Optional[float] = None) -> User:
        pass

    @abstractmethod
    async def update(self, user: User, timeout: Optional[float] = None) -> User:
        pass

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def teardown(self) -> None:
        pass
