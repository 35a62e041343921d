"""Photo CLI commands for mirroring photos that background jobs missed."""

import asyncio

import typer

photos_app = typer.Typer()


@photos_app.command("backfill")
def backfill(
    limit: int = typer.Option(100, "--limit", help="Maximum spots to process"),
) -> None:
    """Mirror photos for spots that have a photo reference but no durable URL."""
    asyncio.run(_backfill(limit))


async def _backfill(limit: int) -> None:
    from spots_api.core.config import get_settings
    from spots_api.core.database import dispose_engine, get_session_factory, init_engine
    from spots_api.core.dependencies import build_service_registry
    from spots_api.services.spot_service import get_spots_missing_photos

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        registry = build_service_registry(settings, factory)
        if registry.storage_client is None:
            typer.echo("Error: object storage is not configured", err=True)
            raise typer.Exit(code=1)

        async with factory() as session:
            pending = await get_spots_missing_photos(session, limit=limit)
        if not pending:
            typer.echo("All spots with photos are already mirrored.")
            return

        typer.echo(f"Mirroring {len(pending)} photo(s)...")
        urls = await registry.photo_service.ensure_photos(pending)
        typer.echo("\nBackfill complete:")
        typer.echo(f"  Processed:  {len(pending)}")
        typer.echo(f"  Mirrored:   {len(urls)}")
        typer.echo(f"  Failed:     {len(pending) - len(urls)}")
    finally:
        await dispose_engine()
