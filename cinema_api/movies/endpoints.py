# cinema_api/movies/endpoints.py
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status

from .filters import Filters, validate_filters
from .models import MovieCreate, MovieEnvelope, MovieListEnvelope, MovieUpdate, validate_movie
from .sqlite_movie_store import get_sqlite_movie_store
from .storage_interfaces import AbstractMovieStore
from ..dependencies import require_permission
from ..errors import EditConflictError, RecordNotFoundError
from ..permissions import MOVIES_READ, MOVIES_WRITE
from ..storage.sqlite_base import SQLITE_MAX_INTEGER
from ..users.models import MessageEnvelope, User
from ..validator import Validator

logger = logging.getLogger(__name__)

movies_router = APIRouter(prefix="/v1/movies", tags=["Movies"])


def read_id_param(raw_id: str) -> int:
    """Parse a path id; anything that is not a positive integer is simply not found."""
    try:
        movie_id = int(raw_id)
    except ValueError:
        raise RecordNotFoundError()
    if movie_id < 1 or movie_id > SQLITE_MAX_INTEGER:
        raise RecordNotFoundError()
    return movie_id


def read_int(value: Optional[str], key: str, default: int, v: Validator) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        v.add_error(key, "must be an integer value")
        return default


@movies_router.get("", response_model=MovieListEnvelope)
async def list_movies_endpoint(
    store: Annotated[AbstractMovieStore, Depends(get_sqlite_movie_store)],
    _: Annotated[User, Depends(require_permission(MOVIES_READ))],
    title: Annotated[str, Query(description="Words that must all appear in the title.")] = "",
    genres: Annotated[str, Query(description="Comma-separated genres the movie must all have.")] = "",
    page: Annotated[Optional[str], Query()] = None,
    page_size: Annotated[Optional[str], Query()] = None,
    sort: Annotated[str, Query(description="Sort field, prefix with '-' for descending.")] = "id"
):
    """List movies with full-text title search, genre filtering, sorting and pagination."""
    v = Validator()
    filters = Filters(
        page=read_int(page, "page", 1, v),
        page_size=read_int(page_size, "page_size", 20, v),
        sort=sort
    )
    validate_filters(v, filters)
    v.raise_if_invalid()

    genre_list = [genre for genre in genres.split(",") if genre] if genres else []
    movies, metadata = await store.get_all(title, genre_list, filters)
    return MovieListEnvelope(metadata=metadata, movies=movies)


@movies_router.post("", response_model=MovieEnvelope, status_code=status.HTTP_201_CREATED)
async def create_movie_endpoint(
    movie_create: MovieCreate,
    response: Response,
    store: Annotated[AbstractMovieStore, Depends(get_sqlite_movie_store)],
    user: Annotated[User, Depends(require_permission(MOVIES_WRITE))]
):
    """Create a movie. Returns 201 with a Location header pointing at the new record."""
    movie = movie_create.to_movie()

    v = Validator()
    validate_movie(v, movie)
    v.raise_if_invalid()

    movie = await store.insert(movie)
    logger.info(f"API: user {user.id} created movie {movie.id}.")
    response.headers["Location"] = f"/v1/movies/{movie.id}"
    return MovieEnvelope(movie=movie)


@movies_router.get("/{movie_id}", response_model=MovieEnvelope)
async def show_movie_endpoint(
    movie_id: str,
    store: Annotated[AbstractMovieStore, Depends(get_sqlite_movie_store)],
    _: Annotated[User, Depends(require_permission(MOVIES_READ))]
):
    movie = await store.get(read_id_param(movie_id))
    return MovieEnvelope(movie=movie)


@movies_router.patch("/{movie_id}", response_model=MovieEnvelope)
async def update_movie_endpoint(
    movie_id: str,
    movie_update: MovieUpdate,
    store: Annotated[AbstractMovieStore, Depends(get_sqlite_movie_store)],
    user: Annotated[User, Depends(require_permission(MOVIES_WRITE))],
    x_expected_version: Annotated[Optional[str], Header()] = None
):
    """
    Partially update a movie.

    The stored version read here is the one the write is conditioned on; if
    another request updates the movie in between, the write fails with 409.
    An optional X-Expected-Version header lets clients pin the version they
    last saw.
    """
    movie = await store.get(read_id_param(movie_id))

    if x_expected_version and x_expected_version != str(movie.version):
        raise EditConflictError()

    movie = movie_update.apply_to(movie)

    v = Validator()
    validate_movie(v, movie)
    v.raise_if_invalid()

    movie = await store.update(movie)
    logger.info(f"API: user {user.id} updated movie {movie.id} to version {movie.version}.")
    return MovieEnvelope(movie=movie)


@movies_router.delete("/{movie_id}", response_model=MessageEnvelope)
async def delete_movie_endpoint(
    movie_id: str,
    store: Annotated[AbstractMovieStore, Depends(get_sqlite_movie_store)],
    user: Annotated[User, Depends(require_permission(MOVIES_WRITE))]
):
    await store.delete(read_id_param(movie_id))
    logger.info(f"API: user {user.id} deleted movie {movie_id}.")
    return MessageEnvelope(message="movie successfully deleted")
