# cinema_api/storage/__init__.py

"""Shared SQLite plumbing for the movie, user, token and permission stores.

One process-wide connection, the schema bootstrap, per-call query deadlines
and the SQLiteStore base class every concrete store builds on.
"""

from .sqlite_base import (
    SQLITE_MAX_INTEGER,
    get_sqlite_db_connection,
    init_sqlite_db,
    close_sqlite_db_connection,
    query_deadline,
    SQLiteStore
)

__all__ = [
    "SQLITE_MAX_INTEGER",
    "get_sqlite_db_connection",
    "init_sqlite_db",
    "close_sqlite_db_connection",
    "query_deadline",
    "SQLiteStore"
]
