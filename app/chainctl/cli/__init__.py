"""CLI package for chainctl.

This package contains the Typer application and all subcommands.
"""

from chainctl.cli.main import app

__all__ = ["app"]
