"""CLI module for georeferencing tools.

Provides the `byom` command-line interface for managing maps and reference
points and converting between pixel and geographic coordinates.
"""

from byom.cli.main import app

__all__ = ["app"]
