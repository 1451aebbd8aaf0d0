"""Main Typer CLI application for georeferencing tools."""

import logging
from pathlib import Path
from typing import Optional

import typer

from byom.config import GeorefConfig, get_default_config

app = typer.Typer(
    help="Georeference map images from reference points and convert coordinates",
    no_args_is_help=True,
)

# Subcommand groups
map_app = typer.Typer(help="Map commands")
point_app = typer.Typer(help="Reference point commands")
transform_app = typer.Typer(help="Transform fitting and coordinate conversion commands")

app.add_typer(map_app, name="map")
app.add_typer(point_app, name="point")
app.add_typer(transform_app, name="transform")


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="YAML configuration file with a 'byom' section"
    ),
    store: Optional[Path] = typer.Option(
        None, help="Store file (overrides store_path from the configuration)"
    ),
    log_level: Optional[str] = typer.Option(
        None, help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """
    Load configuration and set up logging for all subcommands.
    """
    try:
        config = GeorefConfig.from_yaml(config_file) if config_file else get_default_config()
        overrides = {}
        if store is not None:
            overrides["store_path"] = store
        if log_level is not None:
            overrides["log_level"] = log_level
        if overrides:
            config = GeorefConfig.from_dict({**config.to_dict(), **overrides})
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


def _register_commands() -> None:
    """
    Import command modules to register commands with their respective apps.

    Commands use decorators like @map_app.command() which register
    themselves when the module is imported.
    """
    from byom.cli import maps, points, transform

    # Avoid "imported but unused" warnings by explicitly using the module
    _ = maps
    _ = points
    _ = transform


_register_commands()


if __name__ == "__main__":
    app()
