# cinema_api/permissions/models.py
from typing import Iterable


class Permissions(frozenset):
    """
    Immutable snapshot of the permission codes (like "movies:read" and
    "movies:write") held by one principal at the time it was fetched.
    """

    def __new__(cls, codes: Iterable[str] = ()):
        return super().__new__(cls, codes)

    def include(self, code: str) -> bool:
        return code in self

    def __repr__(self) -> str:
        return f"Permissions({sorted(self)!r})"


def require(permissions: Permissions, code: str) -> bool:
    """
    Decide whether ``code`` is allowed for a principal holding ``permissions``.

    Pure membership test: a principal without the code and a principal
    without any permissions get the same answer.
    """
    return permissions.include(code)
