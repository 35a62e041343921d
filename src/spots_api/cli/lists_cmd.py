"""User list CLI commands."""

import asyncio
import uuid

import typer

lists_app = typer.Typer()


def _parse_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        typer.echo(f"Error: {value!r} is not a valid UUID", err=True)
        raise typer.Exit(code=1) from None


@lists_app.command("defaults")
def defaults(
    user_id: str = typer.Argument(..., help="User UUID"),
) -> None:
    """Create the starred, favorites, and bucket-list lists for a user."""
    asyncio.run(_defaults(_parse_uuid(user_id)))


@lists_app.command("show")
def show(
    user_id: str = typer.Argument(..., help="User UUID"),
    spots: bool = typer.Option(False, "--spots", help="Also list the spots in each list"),  # noqa: FBT001
) -> None:
    """Show a user's lists with spot counts."""
    asyncio.run(_show(_parse_uuid(user_id), spots))


async def _defaults(user_id: uuid.UUID) -> None:
    from spots_api.core.config import get_settings
    from spots_api.core.database import dispose_engine, get_session_factory, init_engine
    from spots_api.services.list_service import create_default_lists

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            lists = await create_default_lists(session, user_id)
            for user_list in lists:
                typer.echo(f"{user_list.id}  {user_list.display_name}")
    finally:
        await dispose_engine()


async def _show(user_id: uuid.UUID, include_spots: bool) -> None:
    from spots_api.core.config import get_settings
    from spots_api.core.database import dispose_engine, get_session_factory, init_engine
    from spots_api.services.list_service import get_spots_in_list, get_user_lists

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            lists = await get_user_lists(session, user_id)
            if not lists:
                typer.echo("No lists found.")
                return
            for user_list in lists:
                typer.echo(f"{user_list.name} ({user_list.spot_count})  {user_list.id}")
                if include_spots:
                    for item in await get_spots_in_list(session, user_list.id):
                        typer.echo(f"    {item.spot.place_id}  {item.spot.name}")
    finally:
        await dispose_engine()
