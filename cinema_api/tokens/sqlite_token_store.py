# cinema_api/tokens/sqlite_token_store.py
import sqlite3
import logging
from typing import Optional

from .models import TokenData, TokenScope
from .storage_interfaces import AbstractTokenStore
from ..storage.sqlite_base import SQLiteStore

logger = logging.getLogger(__name__)


class SQLiteTokenStore(SQLiteStore, AbstractTokenStore):
    """SQLite implementation for storing and revoking scoped tokens."""

    store_name = "SQLiteTokenStore"

    def _row_to_token_data(self, row: Optional[sqlite3.Row]) -> Optional[TokenData]:
        if not row:
            return None
        return TokenData(
            hash=row["hash"],
            user_id=row["user_id"],
            expiry=row["expiry"],
            scope=row["scope"]
        )

    async def insert(self, token_data: TokenData, timeout: Optional[float] = None) -> None:
        query = "INSERT INTO tokens (hash, user_id, expiry, scope) VALUES (?, ?, ?, ?)"
        params = (
            token_data.hash,
            token_data.user_id,
            token_data.expiry.isoformat(),
            token_data.scope.value
        )
        await self._execute_query(query, params, timeout=timeout)
        logger.info(
            f"Stored '{token_data.scope.value}' token {token_data.hash[:10]}... for user {token_data.user_id}."
        )

    async def get_by_hash(
        self, token_hash: str, scope: TokenScope, timeout: Optional[float] = None
    ) -> Optional[TokenData]:
        query = "SELECT hash, user_id, expiry, scope FROM tokens WHERE hash = ? AND scope = ?"
        row = await self._fetchone(query, (token_hash, scope.value), timeout=timeout)
        return self._row_to_token_data(row)

    async def delete_all_for_user(
        self, user_id: int, scope: TokenScope, timeout: Optional[float] = None
    ) -> int:
        query = "DELETE FROM tokens WHERE user_id = ? AND scope = ?"
        cursor = await self._execute_query(query, (user_id, scope.value), timeout=timeout)
        logger.info(f"Deleted {cursor.rowcount} '{scope.value}' token(s) for user {user_id}.")
        return cursor.rowcount


# Global singleton instance management
_sqlite_token_store_instance: Optional[SQLiteTokenStore] = None


async def get_sqlite_token_store() -> SQLiteTokenStore:
    """Get or create the singleton SQLite token store instance."""
    global _sqlite_token_store_instance
    if _sqlite_token_store_instance is None:
        _sqlite_token_store_instance = SQLiteTokenStore()
        await _sqlite_token_store_instance.initialize()
    return _sqlite_token_store_instance
