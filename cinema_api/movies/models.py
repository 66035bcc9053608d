# cinema_api/movies/models.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from .filters import Metadata
from .runtime import Runtime, RuntimeInput
from ..validator import Validator, unique

FIRST_FILM_YEAR = 1888


class Movie(BaseModel):
    """
    A movie record.

    ``id``, ``created_at`` and ``version`` are assigned by the store;
    ``version`` starts at 1 and is the optimistic-concurrency token checked
    on every update.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    created_at: Optional[datetime] = None
    title: str = ""
    year: int = 0
    runtime: Runtime = 0
    genres: Optional[List[str]] = None
    version: int = 0

    @model_serializer(mode="wrap")
    def _omit_empty_fields(self, handler) -> Dict[str, Any]:
        data = handler(self)
        for key in ("year", "runtime", "genres"):
            if not getattr(self, key):
                data.pop(key, None)
        return data


class MovieCreate(BaseModel):
    """Request body for creating a movie. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", strict=True)

    title: Optional[str] = None
    year: Optional[int] = None
    runtime: Optional[RuntimeInput] = Field(default=None, description='Runtime as "<N> mins".')
    genres: Optional[List[str]] = None

    def to_movie(self) -> Movie:
        return Movie(
            title=self.title or "",
            year=self.year or 0,
            runtime=self.runtime or 0,
            genres=self.genres
        )


class MovieUpdate(BaseModel):
    """Partial update body; only the fields that are present replace stored values."""

    model_config = ConfigDict(extra="forbid", strict=True)

    title: Optional[str] = None
    year: Optional[int] = None
    runtime: Optional[RuntimeInput] = None
    genres: Optional[List[str]] = None

    def apply_to(self, movie: Movie) -> Movie:
        return movie.model_copy(update=self.model_dump(exclude_none=True))


class MovieEnvelope(BaseModel):
    movie: Movie


class MovieListEnvelope(BaseModel):
    metadata: Metadata
    movies: List[Movie]


def validate_movie(v: Validator, movie: Movie) -> None:
    current_year = datetime.now(timezone.utc).year

    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title.encode("utf-8")) <= 500, "title", "must not be more than 500 bytes long")

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= FIRST_FILM_YEAR, "year", f"must be greater than {FIRST_FILM_YEAR}")
    v.check(movie.year <= current_year, "year", "must not be in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive integer")

    v.check(movie.genres is not None, "genres", "must be provided")
    genres = movie.genres or []
    v.check(len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(genres) <= 5, "genres", "must not contain more than 5 genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")
