"""CLI commands for chainctl.

This package contains all subcommand implementations.
"""

from chainctl.cli.commands import chains, create, known, mirrors

__all__ = ["chains", "create", "known", "mirrors"]
