"""Allow ``python -m byom``."""

from byom.cli import app

app(prog_name="byom")
