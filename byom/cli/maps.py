"""Map management CLI commands."""

import json
from pathlib import Path
from typing import Optional

import typer

from byom.cli.common import OutputFormat, fail, open_session, open_store
from byom.cli.main import map_app
from byom.image_info import read_image_size
from byom.kml import render_map_kml
from byom.transforms import image_footprint
from byom.validation import validate_image_dimension


@map_app.command("add")
def add_command(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Map display name"),
    image: Optional[Path] = typer.Option(None, help="Map image file"),
    width: Optional[int] = typer.Option(None, help="Image width in pixels (read from --image if omitted)"),
    height: Optional[int] = typer.Option(None, help="Image height in pixels (read from --image if omitted)"),
) -> None:
    """
    Register a new map image.

    Example:
        byom map add --name "Campus" --image campus.jpg
        byom map add --name "Trail" --width 4000 --height 3000
    """
    try:
        if image is not None and (width is None or height is None):
            read_width, read_height = read_image_size(image)
            width = width if width is not None else read_width
            height = height if height is not None else read_height
        width = validate_image_dimension(width, "width")
        height = validate_image_dimension(height, "height")
    except (FileNotFoundError, ValueError) as e:
        fail(str(e))

    with open_store(ctx) as store:
        map_id = store.add_map(
            name,
            image_path=str(image) if image is not None else None,
            image_width=width,
            image_height=height,
        )
    typer.echo(f"Added map {map_id}: {name}")


@map_app.command("list")
def list_command(
    ctx: typer.Context,
    output_format: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
) -> None:
    """
    List all maps with their reference point counts.
    """
    with open_store(ctx) as store:
        rows = [(record, len(store.list_points(record.id))) for record in store.list_maps()]

    if output_format == OutputFormat.JSON:
        typer.echo(json.dumps(
            [{**record.to_dict(), "point_count": count} for record, count in rows], indent=2
        ))
        return

    if not rows:
        typer.echo("No maps")
        return
    for record, count in rows:
        size = f"{record.image_width}x{record.image_height}" if record.has_dimensions else "unknown size"
        typer.echo(f"{record.id:>4}  {record.name}  ({size}, {count} points)")


@map_app.command("delete")
def delete_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
) -> None:
    """
    Delete a map together with its reference points.
    """
    with open_store(ctx) as store:
        if store.get_map(map_id) is None:
            fail(f"Map not found: {map_id}")
        store.delete_map(map_id)
    typer.echo(f"Deleted map {map_id}")


@map_app.command("export-kml")
def export_kml_command(
    ctx: typer.Context,
    map_id: int = typer.Option(..., "--map", help="Map ID"),
    output: Optional[Path] = typer.Option(None, help="Output KML file (default: print to stdout)"),
) -> None:
    """
    Export a map's reference points, and its outline when a transform can be
    fitted, as KML for viewing in Google Earth or any GIS tool.

    Example:
        byom map export-kml --map 1 --output campus.kml
    """
    with open_session(ctx, map_id) as session:
        record = session.map
        model = session.transform()
        footprint = None
        if model is not None and record.has_dimensions:
            footprint = image_footprint(record.image_width, record.image_height, model)
        kml = render_map_kml(record.name, session.points(), footprint=footprint)

    if output is None:
        typer.echo(kml)
        return
    output.write_text(kml, encoding="utf-8")
    typer.echo(f"KML saved to: {output}")
