# cinema_api/movies/__init__.py
"""
Movie catalog module initialization.

Movie models and validation, the runtime wire codec, listing filters and
pagination metadata, and the storage layer with optimistic concurrency.
"""

from .runtime import Runtime, RuntimeInput, InvalidRuntimeFormatError, encode_runtime, decode_runtime
from .filters import Filters, Metadata, MOVIE_SORT_SAFELIST, calculate_metadata, validate_filters
from .models import Movie, MovieCreate, MovieUpdate, MovieEnvelope, MovieListEnvelope, validate_movie
from .storage_interfaces import AbstractMovieStore
from .sqlite_movie_store import SQLiteMovieStore, get_sqlite_movie_store

__all__ = [
    # Runtime codec
    "Runtime",
    "RuntimeInput",
    "InvalidRuntimeFormatError",
    "encode_runtime",
    "decode_runtime",
    # Listing parameters
    "Filters",
    "Metadata",
    "MOVIE_SORT_SAFELIST",
    "calculate_metadata",
    "validate_filters",
    # Data models
    "Movie",
    "MovieCreate",
    "MovieUpdate",
    "MovieEnvelope",
    "MovieListEnvelope",
    "validate_movie",
    # Storage layer
    "AbstractMovieStore",
    "SQLiteMovieStore",
    "get_sqlite_movie_store"
]
