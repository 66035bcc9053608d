# cinema_api/cli/main_cli.py
import typer
from . import db_cli
from . import permissions_cli
from .config import CINEMA_SERVER_HOST, CINEMA_SERVER_PORT, CINEMA_SERVER_RELOAD

# Main CLI application with help enabled when no arguments are provided
app = typer.Typer(
    name="cinema",
    help="Cinema API Command Line Interface.",
    no_args_is_help=True
)

app.add_typer(db_cli.app, name="db")
app.add_typer(permissions_cli.app, name="permissions")


@app.callback()
def main_callback():
    """
    Cinema API main CLI application.
    Use 'cinema permissions --help' to manage user permissions.
    """
    pass


@app.command("serve")
def serve(
    host: str = typer.Option(CINEMA_SERVER_HOST, help="Interface to bind."),
    port: int = typer.Option(CINEMA_SERVER_PORT, help="Port to listen on."),
    reload: bool = typer.Option(CINEMA_SERVER_RELOAD, help="Reload on code changes.")
):
    """Run the API with uvicorn."""
    import uvicorn

    typer.echo(f"CLI: Starting Uvicorn server on {host}:{port} (reload={reload})")
    uvicorn.run("cinema_api.main:app", host=host, port=port, reload=reload)


def cli_entry_point():
    """Entry point function for console script registration in pyproject.toml"""
    app()


if __name__ == "__main__":
    cli_entry_point()
