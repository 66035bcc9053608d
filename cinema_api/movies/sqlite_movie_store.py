# cinema_api/movies/sqlite_movie_store.py
import sqlite3
import logging
import json
from typing import List, Optional, Sequence, Tuple

from .filters import Filters, Metadata, calculate_metadata
from .models import Movie
from .storage_interfaces import AbstractMovieStore
from ..errors import EditConflictError, RecordNotFoundError
from ..storage.sqlite_base import SQLITE_MAX_INTEGER, SQLiteStore, get_sqlite_db_connection

logger = logging.getLogger(__name__)

MOVIE_COLUMNS = "id, created_at, title, year, runtime, genres, version"


class SQLiteMovieStore(SQLiteStore, AbstractMovieStore):
    """SQLite implementation of the movie storage interface."""

    store_name = "SQLiteMovieStore"

    def _row_to_movie(self, row: sqlite3.Row) -> Movie:
        return Movie(
            id=row["id"],
            created_at=row["created_at"],
            title=row["title"],
            year=row["year"],
            runtime=row["runtime"],
            genres=json.loads(row["genres"]),
            version=row["version"]
        )

    async def insert(self, movie: Movie, timeout: Optional[float] = None) -> Movie:
        """
        Insert a movie and read back the store-assigned columns.

        id, created_at and version come from the table definition, so the
        insert and the read-back run in one transaction.
        """
        conn = await get_sqlite_db_connection()
        with self._transaction(conn, timeout) as cursor:
            cursor.execute(
                "INSERT INTO movies (title, year, runtime, genres) VALUES (?, ?, ?, ?)",
                (movie.title, movie.year, movie.runtime, json.dumps(movie.genres or []))
            )
            cursor.execute(
                f"SELECT {MOVIE_COLUMNS} FROM movies WHERE id = ?",
                (cursor.lastrowid,)
            )
            row = cursor.fetchone()

        created = self._row_to_movie(row)
        logger.info(f"Inserted movie {created.id} '{created.title}'.")
        return created

    async def get(self, movie_id: int, timeout: Optional[float] = None) -> Movie:
        # AUTOINCREMENT ids start at 1 and INTEGER columns stop at 2**63 - 1
        if movie_id < 1 or movie_id > SQLITE_MAX_INTEGER:
            raise RecordNotFoundError()

        query = f"SELECT {MOVIE_COLUMNS} FROM movies WHERE id = ?"
        row = await self._fetchone(query, (movie_id,), timeout=timeout)
        if row is None:
            raise RecordNotFoundError()
        return self._row_to_movie(row)

    async def update(self, movie: Movie, timeout: Optional[float] = None) -> Movie:
        """
        Optimistic-concurrency update.

        The version check and the increment are one UPDATE statement, so two
        writers starting from the same version can never both succeed. Zero
        affected rows means the version moved on or the row is gone.
        """
        query = """
            UPDATE movies
            SET title = ?, year = ?, runtime = ?, genres = ?, version = version + 1
            WHERE id = ? AND version = ?
        """
        params = (
            movie.title,
            movie.year,
            movie.runtime,
            json.dumps(movie.genres or []),
            movie.id,
            movie.version
        )
        cursor = await self._execute_query(query, params, timeout=timeout)
        if cursor.rowcount == 0:
            logger.warning(f"Edit conflict updating movie {movie.id} at version {movie.version}.")
            raise EditConflictError()

        updated = movie.model_copy(update={"version": movie.version + 1})
        logger.info(f"Updated movie {updated.id} to version {updated.version}.")
        return updated

    async def delete(self, movie_id: int, timeout: Optional[float] = None) -> None:
        if movie_id < 1 or movie_id > SQLITE_MAX_INTEGER:
            raise RecordNotFoundError()

        cursor = await self._execute_query("DELETE FROM movies WHERE id = ?", (movie_id,), timeout=timeout)
        if cursor.rowcount == 0:
            raise RecordNotFoundError()
        logger.info(f"Deleted movie {movie_id}.")

    async def get_all(
        self,
        title: str,
        genres: Sequence[str],
        filters: Filters,
        timeout: Optional[float] = None
    ) -> Tuple[List[Movie], Metadata]:
        """
        Full-text title search plus genre containment, sorted and paged.

        The window count is taken over every matching row before LIMIT/OFFSET,
        so the metadata reflects total matches rather than the page size.
        ``id ASC`` breaks ties so pages stay stable when the sort key repeats.
        """
        query = f"""
            SELECT count(*) OVER() AS total_records, {MOVIE_COLUMNS}
            FROM movies
            WHERE (title_matches(title, ?) OR ? = '')
            AND NOT EXISTS (
                SELECT 1 FROM json_each(?) AS wanted
                WHERE wanted.value NOT IN (SELECT value FROM json_each(movies.genres))
            )
            ORDER BY {filters.sort_column()} {filters.sort_direction()}, id ASC
            LIMIT ? OFFSET ?
        """
        params = (title, title, json.dumps(list(genres)), filters.limit(), filters.offset())
        rows = await self._fetchall(query, params, timeout=timeout)

        total_records = 0
        movies: List[Movie] = []
        for row in rows:
            total_records = row["total_records"]
            movies.append(self._row_to_movie(row))

        metadata = calculate_metadata(total_records, filters.page, filters.page_size)
        return movies, metadata


# Singleton instance management
_sqlite_movie_store_instance: Optional[SQLiteMovieStore] = None


async def get_sqlite_movie_store() -> SQLiteMovieStore:
    """Get or create the singleton SQLiteMovieStore instance."""
    global _sqlite_movie_store_instance
    if _sqlite_movie_store_instance is None:
        _sqlite_movie_store_instance = SQLiteMovieStore()
        await _sqlite_movie_store_instance.initialize()
    return _sqlite_movie_store_instance
