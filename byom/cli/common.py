"""Helpers shared by the CLI command modules."""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import NoReturn

import typer

from byom.config import GeorefConfig
from byom.session import MapSession
from byom.store import PointStore


class OutputFormat(str, Enum):
    """Output format options."""

    HUMAN = "human"
    JSON = "json"


def get_config(ctx: typer.Context) -> GeorefConfig:
    """Configuration loaded by the main callback."""
    return ctx.obj


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def error_text(e: Exception) -> str:
    """Readable message for an exception (KeyError repr adds quotes)."""
    if isinstance(e, KeyError) and e.args:
        return str(e.args[0])
    return str(e)


@contextmanager
def open_store(ctx: typer.Context) -> Iterator[PointStore]:
    """Open the configured store for the duration of a command."""
    config = get_config(ctx)
    try:
        store = PointStore(config.store_path).open()
    except ValueError as e:
        fail(str(e))
    try:
        yield store
    finally:
        store.close()


@contextmanager
def open_session(ctx: typer.Context, map_id: int) -> Iterator[MapSession]:
    """Open the store and bind a session to one map."""
    with open_store(ctx) as store:
        try:
            session = MapSession(store, map_id, get_config(ctx))
        except KeyError as e:
            fail(error_text(e))
        yield session
