# tests/test_permissions.py
from cinema_api.permissions import MOVIES_READ, MOVIES_WRITE, Permissions, require


def test_require_is_membership():
    permissions = Permissions([MOVIES_READ])

    assert require(permissions, MOVIES_READ)
    assert not require(permissions, MOVIES_WRITE)
    assert not require(Permissions(), MOVIES_READ)


def test_permissions_are_immutable_sets():
    permissions = Permissions([MOVIES_WRITE, MOVIES_READ, MOVIES_READ])

    assert len(permissions) == 2
    assert permissions.include(MOVIES_WRITE)
    assert repr(permissions) == "Permissions(['movies:read', 'movies:write'])"
    assert not hasattr(permissions, "add")


async def test_user_without_grants_has_no_permissions(permission_store, user):
    assert await permission_store.get_all_for_user(user.id) == Permissions()


async def test_add_for_user_ignores_unknown_and_repeated_codes(permission_store, user):
    await permission_store.add_for_user(user.id, MOVIES_READ)
    await permission_store.add_for_user(user.id, MOVIES_READ, MOVIES_WRITE, "movies:delete")

    permissions = await permission_store.get_all_for_user(user.id)
    assert permissions == Permissions([MOVIES_READ, MOVIES_WRITE])


async def test_permissions_are_per_user(permission_store, user_store, user):
    from cinema_api.users.models import User

    other = await user_store.insert(User(name="Bob", email="bob@example.com", password_hash=b"x"))
    await permission_store.add_for_user(user.id, MOVIES_WRITE)

    assert await permission_store.get_all_for_user(other.id) == Permissions()
    assert require(await permission_store.get_all_for_user(user.id), MOVIES_WRITE)
