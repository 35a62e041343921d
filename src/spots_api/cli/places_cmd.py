"""Place search CLI commands for checking the upstream provider from a shell."""

import asyncio

import typer

places_app = typer.Typer()


@places_app.command("search")
def search(
    query: str = typer.Argument(..., help="Free text to search for"),
    lat: float | None = typer.Option(None, "--lat", help="Origin latitude"),
    lng: float | None = typer.Option(None, "--lng", help="Origin longitude"),
) -> None:
    """Search places by text, nearest first when an origin is given."""
    if (lat is None) != (lng is None):
        typer.echo("Error: --lat and --lng must be given together", err=True)
        raise typer.Exit(code=1)
    asyncio.run(_search(query, lat, lng))


@places_app.command("nearby")
def nearby(
    lat: float = typer.Option(..., "--lat", help="Origin latitude"),
    lng: float = typer.Option(..., "--lng", help="Origin longitude"),
    radius: float | None = typer.Option(None, "--radius", help="Radius in meters"),
    limit: int | None = typer.Option(None, "--limit", help="Maximum places (1-20)"),
    page_token: str | None = typer.Option(None, "--page-token", help="Continuation token"),
) -> None:
    """List places around a point without writing to the database."""
    asyncio.run(_nearby(lat, lng, radius, limit, page_token))


@places_app.command("details")
def details(
    place_id: str = typer.Argument(..., help="Upstream place id"),
) -> None:
    """Show a spot, fetching and storing it on first lookup."""
    asyncio.run(_details(place_id))


async def _search(query: str, lat: float | None, lng: float | None) -> None:
    from spots_api.core.config import get_settings
    from spots_api.lib.cache import CoordinateCache, ResponseCache
    from spots_api.lib.geo import format_distance
    from spots_api.lib.places import Coordinate, get_places_provider
    from spots_api.services.search_service import SearchService, distance_from

    settings = get_settings()
    service = SearchService(
        get_places_provider(settings),
        ResponseCache(ttl_seconds=settings.search_cache_ttl_seconds),
        CoordinateCache(max_entries=settings.coordinate_cache_max_entries),
        result_limit=settings.places_search_result_limit,
        bias_radius_meters=settings.places_search_radius_meters,
    )
    origin = Coordinate(lat, lng) if lat is not None and lng is not None else None
    results = await service.search(query, origin)
    if not results:
        typer.echo("No places found.")
        return
    for candidate in results:
        line = f"{candidate.place_id}  {candidate.name}"
        if candidate.address:
            line += f", {candidate.address}"
        if origin is not None and candidate.coordinate is not None:
            line += f"  ({format_distance(distance_from(origin, candidate))})"
        typer.echo(line)


async def _nearby(lat: float, lng: float, radius: float | None, limit: int | None, page_token: str | None) -> None:
    from spots_api.core.config import get_settings
    from spots_api.lib.geo import format_distance, haversine_meters
    from spots_api.lib.places import Coordinate, get_places_provider

    settings = get_settings()
    provider = get_places_provider(settings)
    page = await provider.search_nearby(
        Coordinate(lat, lng),
        radius_meters=radius or settings.places_nearby_radius_meters,
        max_results=limit or settings.places_nearby_page_size,
        page_token=page_token,
    )
    places = sorted(page.places, key=lambda p: haversine_meters(lat, lng, p.latitude, p.longitude))
    for place in places:
        meters = haversine_meters(lat, lng, place.latitude, place.longitude)
        typer.echo(f"{place.place_id}  {place.name}  [{place.category}]  {format_distance(meters)}")
    typer.echo(f"\n{len(places)} place(s)")
    if page.next_page_token:
        typer.echo(f"Next page token: {page.next_page_token}")


async def _details(place_id: str) -> None:
    from spots_api.core.config import get_settings
    from spots_api.core.database import dispose_engine, get_session_factory, init_engine
    from spots_api.lib.places import get_places_provider
    from spots_api.services.spot_service import get_or_fetch_spot

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            spot = await get_or_fetch_spot(session, get_places_provider(settings), place_id)
            if spot is None:
                typer.echo(f"Place {place_id} not found.", err=True)
                raise typer.Exit(code=1)
            typer.echo(f"Place ID:   {spot.place_id}")
            typer.echo(f"Name:       {spot.name}")
            typer.echo(f"Address:    {spot.address or '-'}")
            typer.echo(f"City:       {spot.city or '-'}")
            typer.echo(f"Location:   {spot.latitude}, {spot.longitude}")
            typer.echo(f"Types:      {', '.join(spot.types or []) or '-'}")
            typer.echo(f"Photo URL:  {spot.photo_url or '-'}")
    finally:
        await dispose_engine()
