# cinema_api/permissions/__init__.py
"""Permission codes, the authorization decision and their storage."""

from .models import Permissions, require
from .storage_interfaces import AbstractPermissionStore
from .sqlite_permission_store import SQLitePermissionStore, get_sqlite_permission_store

MOVIES_READ = "movies:read"
MOVIES_WRITE = "movies:write"

__all__ = [
    "Permissions",
    "require",
    "AbstractPermissionStore",
    "SQLitePermissionStore",
    "get_sqlite_permission_store",
    "MOVIES_READ",
    "MOVIES_WRITE"
]
