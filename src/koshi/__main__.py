"""Allow running koshi with `python -m koshi`."""

from koshi.cli.app import app

app()
