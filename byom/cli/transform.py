"""Transform fitting and coordinate conversion CLI commands."""

import json
import math

import typer

from byom.cli.common import OutputFormat, fail, open_session
from byom.cli.main import transform_app
from byom.coordinates import parse_degrees
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.session import MapSession
from byom.transforms import AffineTransform, SimilarityTransform, TransformModel


def _require_transform(session: MapSession) -> TransformModel:
    model = session.transform()
    if model is None:
        count = len(session.points())
        if count < 2:
            fail(f"Map {session.map_id} has {count} reference point(s); at least 2 are needed")
        fail(f"Map {session.map_id}: reference points are collinear or coincident")
    return model


def _describe(model: TransformModel) -> list[str]:
    if isinstance(model, SimilarityTransform):
        return [
            "Similarity transform (2 points)",
            f"  scale:    {model.scale:.10g} deg/px",
            f"  rotation: {model.rotation:.10g} rad ({math.degrees(model.rotation):.4f}°)",
            f"  tx:       {model.translate_x:.10f}",
            f"  ty:       {model.translate_y:.10f}",
        ]
    if isinstance(model, AffineTransform):
        return [
            "Affine transform (least squares)",
            f"  lon = {model.a:.10g}*x + {model.b:.10g}*y + {model.c:.10f}",
            f"  lat = {model.d:.10g}*x + {model.e:.10g}*y + {model.f:.10f}",
            f"  det = {model.determinant:.6g}",
        ]
    return [repr(model)]


@transform_app.command("show")
def show_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    output_format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
) -> None:
    """
    Fit and print the transform for a map's current reference points.
    """
    with open_session(ctx, map_id) as session:
        model = _require_transform(session)

    if output_format == OutputFormat.JSON:
        typer.echo(json.dumps(model.to_dict(), indent=2))
        return
    for line in _describe(model):
        typer.echo(line)


@transform_app.command("to-geo")
def to_geo_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    x: float = typer.Option(..., help="Pixel x coordinate (column)"),
    y: float = typer.Option(..., help="Pixel y coordinate (row)"),
) -> None:
    """
    Convert an image pixel to longitude/latitude.

    Example:
        byom transform to-geo --map 1 --x 512 --y 384
    """
    with open_session(ctx, map_id) as session:
        _require_transform(session)
        geo = session.pixel_to_geo(PixelPoint(x, y))

    typer.echo(f"lon={geo.lon:.8f} lat={geo.lat:.8f}")


@transform_app.command("to-pixel")
def to_pixel_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    lon: str = typer.Option(..., help="Longitude, decimal degrees or DMS"),
    lat: str = typer.Option(..., help="Latitude, decimal degrees or DMS"),
) -> None:
    """
    Project a geographic position onto the map image.

    Example:
        byom transform to-pixel --map 1 --lon -0.2280 --lat 39.6390
    """
    try:
        geo = GeoPoint(lon=parse_degrees(lon), lat=parse_degrees(lat))
    except ValueError as e:
        fail(str(e))

    with open_session(ctx, map_id) as session:
        _require_transform(session)
        located = session.locate(geo)

    if located is None:
        fail("Transform is singular, cannot project position")

    suffix = "" if located.on_map else " (outside image)"
    typer.echo(f"x={located.pixel.x:.2f} y={located.pixel.y:.2f}{suffix}")


@transform_app.command("diagnose")
def diagnose_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
) -> None:
    """
    Show the fit residual at each reference point in meters.
    """
    with open_session(ctx, map_id) as session:
        model = _require_transform(session)
        records = session.store.list_points(map_id)
        diagnostics = session.diagnostics()

    for line in _describe(model):
        typer.echo(line)
    typer.echo("")
    # 2- and 3-point fits are exact
    worst = diagnostics.worst_index if len(records) > 3 else None
    for index, (record, residual) in enumerate(zip(records, diagnostics.residuals_m)):
        marker = "  (worst)" if index == worst else ""
        typer.echo(f"{record.id:>4}  residual {residual:.3f} m{marker}")
    typer.echo(f"RMS {diagnostics.rms_m:.3f} m, max {diagnostics.max_m:.3f} m")
