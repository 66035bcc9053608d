# cinema_api/cli/permissions_cli.py
import asyncio
from typing import Annotated, List

import typer

from ..errors import APIError, RecordNotFoundError
from ..permissions.sqlite_permission_store import get_sqlite_permission_store
from ..storage.sqlite_base import close_sqlite_db_connection
from ..users.sqlite_user_store import get_sqlite_user_store

app = typer.Typer(
    name="permissions",
    help="Grant and inspect user permissions.",
    no_args_is_help=True
)


async def _grant(email: str, codes: List[str]) -> List[str]:
    try:
        user = await (await get_sqlite_user_store()).get_by_email(email)
        permission_store = await get_sqlite_permission_store()
        await permission_store.add_for_user(user.id, *codes)
        return sorted(await permission_store.get_all_for_user(user.id))
    finally:
        await close_sqlite_db_connection()


async def _list(email: str) -> List[str]:
    try:
        user = await (await get_sqlite_user_store()).get_by_email(email)
        return sorted(await (await get_sqlite_permission_store()).get_all_for_user(user.id))
    finally:
        await close_sqlite_db_connection()


def _run(coro) -> List[str]:
    try:
        return asyncio.run(coro)
    except RecordNotFoundError:
        typer.secho("Error: No user with that email address.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except APIError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command("grant")
def grant_permissions(
    email: Annotated[str, typer.Argument(help="Email address of the user.")],
    codes: Annotated[List[str], typer.Argument(help="Permission codes, e.g. movies:write.")]
):
    """Grant one or more permission codes to a user. Unknown codes are ignored."""
    current = _run(_grant(email, codes))
    typer.secho(f"CLI: {email} now holds: {', '.join(current) or '(none)'}", fg=typer.colors.GREEN)


@app.command("list")
def list_permissions(
    email: Annotated[str, typer.Argument(help="Email address of the user.")]
):
    """Show the permission codes currently held by a user."""
    current = _run(_list(email))
    typer.echo(", ".join(current) or "(none)")
