# cinema_api/users/sqlite_user_store.py
import sqlite3
import logging
from typing import Optional

from .models import User
from .storage_interfaces import AbstractUserStore
from ..errors import APIError, DuplicateEmailError, EditConflictError, PersistenceError, RecordNotFoundError
from ..storage.sqlite_base import SQLITE_MAX_INTEGER, SQLiteStore, get_sqlite_db_connection

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, created_at, name, email, password_hash, activated, version"


class SQLiteUserStore(SQLiteStore, AbstractUserStore):
    """SQLite implementation of the user account storage interface."""

    store_name = "SQLiteUserStore"

    def _translate_integrity_error(self, error: sqlite3.IntegrityError) -> APIError:
        if "users.email" in str(error):
            return DuplicateEmailError()
        return PersistenceError(f"constraint violation: {error}")

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            created_at=row["created_at"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            activated=bool(row["activated"]),
            version=row["version"]
        )

    async def insert(self, user: User, timeout: Optional[float] = None) -> User:
        conn = await get_sqlite_db_connection()
        with self._transaction(conn, timeout) as cursor:
            cursor.execute(
                "INSERT INTO users (name, email, password_hash, activated) VALUES (?, ?, ?, ?)",
                (user.name, user.email, user.password_hash, int(user.activated))
            )
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (cursor.lastrowid,))
            row = cursor.fetchone()

        created = self._row_to_user(row)
        logger.info(f"Inserted user {created.id}.")
        return created

    async def get(self, user_id: int, timeout: Optional[float] = None) -> User:
        if user_id < 1 or user_id > SQLITE_MAX_INTEGER:
            raise RecordNotFoundError()
        row = await self._fetchone(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,), timeout=timeout)
        if row is None:
            raise RecordNotFoundError()
        return self._row_to_user(row)

    async def get_by_email(self, email: str, timeout: Optional[float] = None) -> User:
        row = await self._fetchone(f"SELECT {USER_COLUMNS} FROM users WHERE email = ?", (email,), timeout=timeout)
        if row is None:
            raise RecordNotFoundError()
        return self._row_to_user(row)

    async def update(self, user: User, timeout: Optional[float] = None) -> User:
        query = """
            UPDATE users
            SET name = ?, email = ?, password_hash = ?, activated = ?, version = version + 1
            WHERE id = ? AND version = ?
        """
        params = (user.name, user.email, user.password_hash, int(user.activated), user.id, user.version)
        cursor = await self._execute_query(query, params, timeout=timeout)
        if cursor.rowcount == 0:
            logger.warning(f"Edit conflict updating user {user.id} at version {user.version}.")
            raise EditConflictError()
        return user.model_copy(update={"version": user.version + 1})


# Global singleton instance management
_sqlite_user_store_instance: Optional[SQLiteUserStore] = None


async def get_sqlite_user_store() -> SQLiteUserStore:
    """Get or create the singleton SQLite user store instance."""
    global _sqlite_user_store_instance
    if _sqlite_user_store_instance is None:
        _sqlite_user_store_instance = SQLiteUserStore()
        await _sqlite_user_store_instance.initialize()
    return _sqlite_user_store_instance
