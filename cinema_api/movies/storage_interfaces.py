# cinema_api/movies/storage_interfaces.py
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .filters import Filters, Metadata
from .models import Movie


class AbstractMovieStore(ABC):
    """
    Abstract base class defining the interface for movie storage.

    Every operation accepts an explicit ``timeout`` in seconds; ``None``
    means the configured default. Implementations raise the application
    errors (RecordNotFoundError, EditConflictError, PersistenceError,
    StorageTimeoutError), never driver errors.
    """

    @abstractmethod
    async def insert(self, movie: Movie, timeout: Optional[float] = None) -> Movie:
        """Store a new movie; returns it with id, created_at and version=1 filled in."""
        pass

    @abstractmethod
    async def get(self, movie_id: int, timeout: Optional[float] = None) -> Movie:
        """Fetch one movie or raise RecordNotFoundError."""
        pass

    @abstractmethod
    async def update(self, movie: Movie, timeout: Optional[float] = None) -> Movie:
        """Write ``movie`` only if the stored version still equals ``movie.version``."""
        pass

    @abstractmethod
    async def delete(self, movie_id: int, timeout: Optional[float] = None) -> None:
        """Hard-delete one movie or raise RecordNotFoundError."""
        pass

    @abstractmethod
    async def get_all(
        self,
        title: str,
        genres: Sequence[str],
        filters: Filters,
        timeout: Optional[float] = None
    ) -> Tuple[List[Movie], Metadata]:
        """Search, filter and page through movies."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def teardown(self) -> None:
        pass
