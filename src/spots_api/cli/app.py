"""Typer CLI root application with serve command."""

import typer

from spots_api.core.config import get_settings
from spots_api.core.logging import setup_logging

app = typer.Typer(name="spots-api", help="Place discovery and saved-list management CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "spots_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from spots_api.cli.db_cmd import db_app
    from spots_api.cli.lists_cmd import lists_app
    from spots_api.cli.photos_cmd import photos_app
    from spots_api.cli.places_cmd import places_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(places_app, name="places", help="Place search commands")
    app.add_typer(photos_app, name="photos", help="Photo mirroring commands")
    app.add_typer(lists_app, name="lists", help="User list commands")


_register_subcommands()
