"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from chainctl import __version__
from chainctl.cli.commands import chains, create, known, mirrors
from chainctl.core.settings import SettingsError, load_settings, load_settings_or_default
from chainctl.utils.formatting import err_console, print_error

# Create main Typer app
app = typer.Typer(
    name="chainctl",
    help="Manage chain configuration files and repository mirrors.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"chainctl version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file. Defaults to ~/.config/chainctl/config.toml.",
            envvar="CHAINCTL_CONFIG",
        ),
    ] = None,
) -> None:
    """chainctl - Chain configuration management.

    Edit and validate the per-ticket chain files that select which
    projects build from source, from which fork and branch, and keep
    local mirrors of every registered repository up to date.
    """
    _configure_logging(verbose)

    try:
        settings = load_settings(config) if config is not None else load_settings_or_default()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings


# Register commands
app.command(name="show")(chains.show)
app.command(name="validate")(chains.validate)
app.command(name="create")(create.create)
app.command(name="rebase")(chains.rebase)
app.command(name="tests")(chains.tests)
app.command(name="mode")(chains.mode)
app.command(name="known")(known.known)
app.command(name="analyze")(known.analyze)
app.add_typer(mirrors.app, name="mirrors")


if __name__ == "__main__":
    app()
