"""Reference point CLI commands."""

import json
from typing import Optional

import typer

from byom.cli.common import OutputFormat, error_text, fail, open_session
from byom.cli.main import point_app
from byom.coordinates import parse_degrees
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint


def _parse_geo(lon: str, lat: str) -> GeoPoint:
    try:
        return GeoPoint(lon=parse_degrees(lon), lat=parse_degrees(lat))
    except ValueError as e:
        fail(str(e))


@point_app.command("add")
def add_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    x: float = typer.Option(..., help="Pixel x coordinate (column)"),
    y: float = typer.Option(..., help="Pixel y coordinate (row)"),
    lon: str = typer.Option(..., help="Longitude, decimal degrees or DMS (e.g. 0°13'48.63\"W)"),
    lat: str = typer.Option(..., help="Latitude, decimal degrees or DMS (e.g. 39°38'25.72\"N)"),
) -> None:
    """
    Add a reference point pairing a map pixel with a geographic position.

    Example:
        byom point add --map 1 --x 120 --y 88 --lon -0.2301 --lat 39.6404
        byom point add --map 1 --x 120 --y 88 --lon "0°13'48.63\\"W" --lat "39°38'25.72\\"N"
    """
    geo = _parse_geo(lon, lat)
    with open_session(ctx, map_id) as session:
        try:
            point_id = session.add_point(PixelPoint(x, y), geo)
        except (KeyError, ValueError) as e:
            fail(error_text(e))
        count = len(session.points())
        model = session.transform()

    typer.echo(f"Added point {point_id} to map {map_id}")
    if model is None and count < 2:
        typer.echo(f"{count} point(s): add {2 - count} more to fit a transform")
    elif model is None:
        typer.echo(f"{count} points: insufficient geometry, add a better-spread point")
    else:
        typer.echo(f"{count} points: using {model.kind.value} transform")


@point_app.command("list")
def list_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    output_format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
) -> None:
    """
    List a map's reference points in insertion order.
    """
    with open_session(ctx, map_id) as session:
        records = session.store.list_points(map_id)

    if output_format == OutputFormat.JSON:
        typer.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        typer.echo("No reference points")
        return
    for r in records:
        typer.echo(f"{r.id:>4}  pixel=({r.image_x:.2f}, {r.image_y:.2f})  lon={r.lon:.8f}  lat={r.lat:.8f}")


@point_app.command("update")
def update_command(
    ctx: typer.Context,
    point_id: int = typer.Option(..., "--point", help="Point ID"),
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    x: Optional[float] = typer.Option(None, help="New pixel x coordinate"),
    y: Optional[float] = typer.Option(None, help="New pixel y coordinate"),
    lon: Optional[str] = typer.Option(None, help="New longitude"),
    lat: Optional[str] = typer.Option(None, help="New latitude"),
) -> None:
    """
    Move a reference point in pixel space, geographic space, or both.

    Unspecified coordinates keep their current values.
    """
    if x is None and y is None and lon is None and lat is None:
        fail("Nothing to update: give at least one of --x, --y, --lon, --lat")

    with open_session(ctx, map_id) as session:
        current = session.store.get_point(point_id)
        if current is None or current.map_id != map_id:
            fail(f"Point {point_id} not found on map {map_id}")

        pixel = None
        if x is not None or y is not None:
            pixel = PixelPoint(
                x if x is not None else current.image_x,
                y if y is not None else current.image_y,
            )
        geo = None
        if lon is not None or lat is not None:
            geo = _parse_geo(
                lon if lon is not None else str(current.lon),
                lat if lat is not None else str(current.lat),
            )

        try:
            session.move_point(point_id, pixel=pixel, geo=geo)
        except (KeyError, ValueError) as e:
            fail(error_text(e))

    typer.echo(f"Updated point {point_id}")


@point_app.command("delete")
def delete_command(
    ctx: typer.Context,
    point_id: int = typer.Option(..., "--point", help="Point ID"),
    map_id: int = typer.Option(..., "--map", help="Map ID"),
) -> None:
    """
    Delete a reference point.
    """
    with open_session(ctx, map_id) as session:
        try:
            session.remove_point(point_id)
        except KeyError as e:
            fail(error_text(e))
    typer.echo(f"Deleted point {point_id}")
