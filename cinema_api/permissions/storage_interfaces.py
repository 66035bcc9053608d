# cinema_api/permissions/storage_interfaces.py
from abc import ABC, abstractmethod
from typing import Optional

from .models import Permissions


class AbstractPermissionStore(ABC):
    """Interface for the user <-> permission code join."""

    @abstractmethod
    async def get_all_for_user(self, user_id: int, timeout: Optional[float] = None) -> Permissions:
        """Return every permission code currently granted to ``user_id``."""
        pass

    @abstractmethod
    async def add_for_user(self, user_id: int, *codes: str, timeout: Optional[float] = None) -> None:
        """Grant ``codes`` to ``user_id``. Unknown and already-granted codes are ignored."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def teardown(self) -> None:
        pass
