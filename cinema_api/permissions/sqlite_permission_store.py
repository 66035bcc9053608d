# cinema_api/permissions/sqlite_permission_store.py
import json
import logging
from typing import Optional

from .models import Permissions
from .storage_interfaces import AbstractPermissionStore
from ..storage.sqlite_base import SQLiteStore

logger = logging.getLogger(__name__)


class SQLitePermissionStore(SQLiteStore, AbstractPermissionStore):
    """SQLite implementation of the permission lookup and grant operations."""

    store_name = "SQLitePermissionStore"

    async def get_all_for_user(self, user_id: int, timeout: Optional[float] = None) -> Permissions:
        query = """
            SELECT permissions.code
            FROM permissions
            INNER JOIN users_permissions ON users_permissions.permission_id = permissions.id
            INNER JOIN users ON users_permissions.user_id = users.id
            WHERE users.id = ?
        """
        rows = await self._fetchall(query, (user_id,), timeout=timeout)
        return Permissions(row["code"] for row in rows)

    async def add_for_user(self, user_id: int, *codes: str, timeout: Optional[float] = None) -> None:
        # Builds an interim (user_id, permission_id) row per known code and copies it into the join table
        query = """
            INSERT OR IGNORE INTO users_permissions (user_id, permission_id)
            SELECT ?, permissions.id FROM permissions
            WHERE permissions.code IN (SELECT value FROM json_each(?))
        """
        cursor = await self._execute_query(query, (user_id, json.dumps(list(codes))), timeout=timeout)
        logger.info(f"Granted {cursor.rowcount} new permission(s) {list(codes)} to user {user_id}.")


# Global singleton instance management
_sqlite_permission_store_instance: Optional[SQLitePermissionStore] = None


async def get_sqlite_permission_store() -> SQLitePermissionStore:
    """Get or create the singleton SQLite permission store instance."""
    global _sqlite_permission_store_instance
    if _sqlite_permission_store_instance is None:
        _sqlite_permission_store_instance = SQLitePermissionStore()
        await _sqlite_permission_store_instance.initialize()
    return _sqlite_permission_store_instance
