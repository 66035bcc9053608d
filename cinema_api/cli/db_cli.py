# cinema_api/cli/db_cli.py
import asyncio

import typer

from ..settings import settings
from ..storage.sqlite_base import close_sqlite_db_connection, get_sqlite_db_connection

app = typer.Typer(
    name="db",
    help="Manage the Cinema API database.",
    no_args_is_help=True
)


async def _init_db() -> None:
    try:
        await get_sqlite_db_connection()
    finally:
        await close_sqlite_db_connection()


@app.command("init")
def init_db():
    """Create the database file and schema if they do not exist yet."""
    typer.echo(f"CLI: Initializing database at {settings.sqlite_db_path}")
    asyncio.run(_init_db())
    typer.secho("CLI: Database schema is up to date.", fg=typer.colors.GREEN)
