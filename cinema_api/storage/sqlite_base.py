# cinema_api/storage/sqlite_base.py
import re
import sqlite3
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from ..errors import APIError, PersistenceError, StorageTimeoutError
from ..settings import settings

logger = logging.getLogger(__name__)

# Global connection instance to ensure single connection per application lifecycle
_db_connection: Optional[sqlite3.Connection] = None

# Number of SQLite VM instructions between deadline checks
PROGRESS_HANDLER_INSTRUCTIONS = 1000

# Largest value an INTEGER column can hold (signed 64-bit)
SQLITE_MAX_INTEGER = 2 ** 63 - 1

SEED_PERMISSION_CODES = ("movies:read", "movies:write")

_WORD_RX = re.compile(r"\w+", re.UNICODE)


def text_search_tokens(text: Optional[str]) -> List[str]:
    """Split text into lowercase word tokens (no stemming, no stop words)."""
    if not text:
        return []
    return [word.lower() for word in _WORD_RX.findall(text)]


def _title_matches(document: Optional[str], query: Optional[str]) -> int:
    """
    SQL function ``title_matches(document, query)``.

    True when every word of ``query`` is a word of ``document``. A query
    without any word characters matches nothing.
    """
    query_tokens = text_search_tokens(query)
    if not query_tokens:
        return 0
    document_tokens = set(text_search_tokens(document))
    return int(all(token in document_tokens for token in query_tokens))


async def get_sqlite_db_connection() -> sqlite3.Connection:
    """
    Get or create a SQLite database connection with proper initialization.

    Uses a singleton pattern to maintain a single connection throughout
    the application lifecycle. Ensures the database directory exists
    and initializes the schema on first connection.

    Returns:
        sqlite3.Connection: The database connection instance

    Raises:
        sqlite3.Error: If database connection fails
    """
    global _db_connection
    if _db_connection is None:
        try:
            db_path = Path(settings.sqlite_db_path).resolve()
            # Ensure the database directory structure exists
            db_path.parent.mkdir(parents=True, exist_ok=True)

            logger.info(f"Attempting to connect to SQLite DB at: {db_path}")

            # Enable thread-safe access for async/FastAPI compatibility
            conn = sqlite3.connect(
                str(db_path),
                check_same_thread=False,
                timeout=settings.db_query_timeout_seconds
            )
            # Enable column access by name instead of index
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.create_function("title_matches", 2, _title_matches, deterministic=True)

            logger.info(f"Successfully connected to SQLite DB: {db_path}")

            # Initialize database schema if tables don't exist
            await init_sqlite_db(conn)
            _db_connection = conn
        except sqlite3.Error as e:
            logger.error(
                f"Error connecting to SQLite database at {settings.sqlite_db_path}: {e}",
                exc_info=True
            )
            raise
    return _db_connection


async def init_sqlite_db(conn: Optional[sqlite3.Connection] = None):
    """
    Initialize the SQLite database schema by creating all required tables.

    Creates the movie catalog, user accounts, scoped tokens and the
    permission tables, then seeds the known permission codes. Uses
    IF NOT EXISTS so repeated calls are harmless.

    Args:
        conn: Optional database connection. If None, uses the global connection.
    """
    db_conn = conn or await get_sqlite_db_connection()
    cursor = db_conn.cursor()

    # Movie catalog; genres is a JSON array kept in insertion order
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS movies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now')),
        title TEXT NOT NULL,
        year INTEGER NOT NULL,
        runtime INTEGER NOT NULL CHECK (runtime >= 0),
        genres TEXT NOT NULL CHECK (json_array_length(genres) BETWEEN 1 AND 5),
        version INTEGER NOT NULL DEFAULT 1
    )
    ''')
    cursor.execute('CREATE INDEX IF NOT EXISTS movies_year_idx ON movies (year)')
    logger.info("Ensured 'movies' table exists.")

    # User accounts; email uniqueness is case-insensitive
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now')),
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE COLLATE NOCASE,
        password_hash BLOB NOT NULL,
        activated INTEGER NOT NULL DEFAULT 0,
        version INTEGER NOT NULL DEFAULT 1
    )
    ''')
    logger.info("Ensured 'users' table exists.")

    # Scoped bearer tokens; only the SHA-256 digest of the plaintext is stored
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS tokens (
        hash TEXT PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        expiry TEXT NOT NULL,
        scope TEXT NOT NULL
    )
    ''')
    cursor.execute('CREATE INDEX IF NOT EXISTS tokens_user_scope_idx ON tokens (user_id, scope)')
    logger.info("Ensured 'tokens' table exists.")

    cursor.execute('''
    CREATE TABLE IF NOT EXISTS permissions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        code TEXT NOT NULL UNIQUE
    )
    ''')
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS users_permissions (
        user_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        permission_id INTEGER NOT NULL REFERENCES permissions (id) ON DELETE CASCADE,
        PRIMARY KEY (user_id, permission_id)
    )
    ''')
    cursor.executemany(
        'INSERT OR IGNORE INTO permissions (code) VALUES (?)',
        [(code,) for code in SEED_PERMISSION_CODES]
    )
    logger.info("Ensured 'permissions' and 'users_permissions' tables exist.")

    db_conn.commit()
    logger.info("SQLite database schema initialized/verified.")


async def close_sqlite_db_connection():
    """
    Properly close the global SQLite database connection.

    Should be called during application shutdown to ensure
    proper cleanup of database resources.
    """
    global _db_connection
    if _db_connection is not None:
        logger.info("Closing SQLite DB connection.")
        _db_connection.close()
        _db_connection = None
        logger.info("SQLite DB connection closed.")


def _is_timeout(error: sqlite3.OperationalError) -> bool:
    message = str(error).lower()
    return "interrupted" in message or "locked" in message or "busy" in message


@contextmanager
def query_deadline(conn: sqlite3.Connection, timeout: float) -> Iterator[None]:
    """
    Abort whatever runs on ``conn`` inside the block once ``timeout`` seconds pass.

    The deadline is checked by a progress handler, so long scans are
    interrupted mid-query; lock waits are bounded by the busy timeout.
    """
    deadline = time.monotonic() + timeout
    conn.execute(f"PRAGMA busy_timeout = {max(int(timeout * 1000), 0)}")
    conn.set_progress_handler(
        lambda: 1 if time.monotonic() >= deadline else 0,
        PROGRESS_HANDLER_INSTRUCTIONS
    )
    try:
        yield
    except sqlite3.OperationalError as e:
        if _is_timeout(e):
            raise StorageTimeoutError() from e
        raise
    finally:
        conn.set_progress_handler(None, PROGRESS_HANDLER_INSTRUCTIONS)


class SQLiteStore:
    """
    Shared query helpers for the SQLite-backed stores.

    Every helper takes an explicit ``timeout`` (seconds, defaulting to
    ``settings.db_query_timeout_seconds``) and translates driver errors into
    the application error taxonomy before they leave the store.
    """

    store_name = "SQLiteStore"

    async def initialize(self) -> None:
        """Initialize the store by ensuring the database connection and schema."""
        await get_sqlite_db_connection()
        logger.info(f"{self.store_name} initialized (tables ensured by sqlite_base).")

    async def teardown(self) -> None:
        """Clean up resources - connection is managed globally."""
        logger.info(f"{self.store_name} teardown (connection managed globally).")

    def _translate_integrity_error(self, error: sqlite3.IntegrityError) -> APIError:
        return PersistenceError(f"constraint violation: {error}")

    @contextmanager
    def _transaction(self, conn: sqlite3.Connection, timeout: Optional[float] = None) -> Iterator[sqlite3.Cursor]:
        """Run a unit of work under a deadline; commit on success, roll back on any failure."""
        effective_timeout = settings.db_query_timeout_seconds if timeout is None else timeout
        cursor = conn.cursor()
        try:
            with query_deadline(conn, effective_timeout):
                yield cursor
            conn.commit()
        except StorageTimeoutError:
            logger.error(f"{self.store_name}: storage call exceeded {effective_timeout}s deadline.")
            conn.rollback()
            raise
        except sqlite3.IntegrityError as e:
            logger.warning(f"{self.store_name}: integrity error: {e}")
            conn.rollback()
            raise self._translate_integrity_error(e) from e
        except sqlite3.Error as e:
            logger.error(f"{self.store_name}: SQLite error: {e}", exc_info=True)
            conn.rollback()
            raise PersistenceError(str(e)) from e
        except OverflowError as e:
            logger.warning(f"{self.store_name}: integer parameter out of range: {e}")
            conn.rollback()
            raise PersistenceError(f"integer parameter out of range: {e}") from e
        except Exception:
            conn.rollback()
            raise

    async def _execute_query(self, query: str, params: tuple = (), timeout: Optional[float] = None) -> sqlite3.Cursor:
        """Execute a write statement and commit it."""
        conn = await get_sqlite_db_connection()
        logger.debug(f"Executing SQL: {query} with params: {params}")
        with self._transaction(conn, timeout) as cursor:
            cursor.execute(query, params)
        return cursor

    async def _fetchone(self, query: str, params: tuple = (), timeout: Optional[float] = None) -> Optional[sqlite3.Row]:
        """Execute a SELECT query and return a single row."""
        conn = await get_sqlite_db_connection()
        with self._transaction(conn, timeout) as cursor:
            cursor.execute(query, params)
            return cursor.fetchone()

    async def _fetchall(self, query: str, params: tuple = (), timeout: Optional[float] = None) -> List[sqlite3.Row]:
        """Execute a SELECT query and return all matching rows."""
        conn = await get_sqlite_db_connection()
        with self._transaction(conn, timeout) as cursor:
            cursor.execute(query, params)
            return cursor.fetchall()
