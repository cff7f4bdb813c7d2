"""hwsync command line interface."""

from hwsync.cli.commands import app, main

__all__ = ["app", "main"]
