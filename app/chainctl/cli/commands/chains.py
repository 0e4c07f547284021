"""Chain file commands.

Show, validate and edit existing chain files: rebase to a new version,
toggle unit tests and switch build modes.
"""

from typing import Annotated

import typer

from chainctl.cli.display import create_errors_table, print_chain
from chainctl.cli.types import build_service, get_settings, parse_assignments
from chainctl.core.chain_file import ChainFileError, serialize_chain
from chainctl.core.registry import RegistryError
from chainctl.core.service import ChainService
from chainctl.models.chain import ChainConfiguration, ProjectMode
from chainctl.utils.formatting import console, print_error, print_success, print_warning

ChainArgument = Annotated[
    str,
    typer.Argument(
        metavar="FILE",
        help="Chain file path or bare name (e.g. DEPM-123).",
        show_default=False,
    ),
]

ProjectsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--project",
        "-p",
        help="Project to change (repeatable). Defaults to every project.",
    ),
]

DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", help="Print the resulting chain file instead of saving it."),
]


def _load(service: ChainService, identifier: str) -> ChainConfiguration:
    """Load a chain, exiting with an error message on failure."""
    try:
        return service.load(identifier)
    except ChainFileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _warn_unknown_projects(config: ChainConfiguration, project_names: list[str] | None) -> None:
    for name in project_names or []:
        if name not in config.projects:
            print_warning(f"Project '{name}' is not part of {config.identity}, ignoring.")


def _save_or_print(service: ChainService, config: ChainConfiguration, dry_run: bool) -> None:
    """Save a changed chain, or print it when dry-running."""
    if dry_run:
        console.print(serialize_chain(config), end="", markup=False, highlight=False)
        return

    try:
        path = service.save(config)
    except ChainFileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Saved {path}")


def show(ctx: typer.Context, chain: ChainArgument) -> None:
    """Show a chain's versions and projects.

    Examples:
        chainctl show DEPM-123
        chainctl show ./chains/DEPM-123-login.properties
    """
    service = build_service(get_settings(ctx))
    print_chain(_load(service, chain))


def validate(ctx: typer.Context, chain: ChainArgument) -> None:
    """Validate a chain against the known projects, forks, branches and tags.

    Exits with code 1 when the chain has errors.
    """
    service = build_service(get_settings(ctx))
    config = _load(service, chain)

    try:
        result = service.validate(config)
    except (RegistryError, RuntimeError) as e:
        print_error(f"Analysis failed: {e}")
        raise typer.Exit(code=1) from e

    if result.is_valid:
        print_success(f"{config.identity} is valid ({config.project_count} projects).")
        return

    console.print(create_errors_table(result.errors))
    print_error(f"{config.identity} has {len(result.errors)} error(s).")
    raise typer.Exit(code=1)


def rebase(
    ctx: typer.Context,
    chain: ChainArgument,
    version: Annotated[
        str,
        typer.Argument(help="New global version.", show_default=False),
    ],
    project_versions: Annotated[
        list[str] | None,
        typer.Option(
            "--project-version",
            "-P",
            help="Per-project version override as PROJECT=VERSION (repeatable).",
        ),
    ] = None,
    dry_run: DryRunOption = False,
) -> None:
    """Rebase a chain onto a new global version.

    Examples:
        chainctl rebase DEPM-123 20019
        chainctl rebase DEPM-123 20019 -P core-lib=20017
    """
    overrides = parse_assignments(project_versions, "--project-version")
    service = build_service(get_settings(ctx))
    config = _load(service, chain)
    _warn_unknown_projects(config, list(overrides))

    service.rebase(config, version, overrides)
    _save_or_print(service, config, dry_run)


def tests(
    ctx: typer.Context,
    chain: ChainArgument,
    enabled: Annotated[
        bool | None,
        typer.Option(
            "--enable/--disable",
            help="Enable or disable unit tests.",
            show_default=False,
        ),
    ] = None,
    projects: ProjectsOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Enable or disable unit tests for projects of a chain.

    Examples:
        chainctl tests DEPM-123 --disable
        chainctl tests DEPM-123 --enable -p core-lib -p web-ui
    """
    if enabled is None:
        print_error("Specify --enable or --disable.")
        raise typer.Exit(code=1)

    service = build_service(get_settings(ctx))
    config = _load(service, chain)
    _warn_unknown_projects(config, projects)

    service.toggle_tests(config, enabled, projects or None)
    _save_or_print(service, config, dry_run)


def mode(
    ctx: typer.Context,
    chain: ChainArgument,
    new_mode: Annotated[
        ProjectMode,
        typer.Argument(
            metavar="MODE",
            help="Build mode: source, binary or ignore.",
            case_sensitive=False,
            show_default=False,
        ),
    ],
    projects: ProjectsOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Switch the build mode of projects of a chain.

    Examples:
        chainctl mode DEPM-123 binary
        chainctl mode DEPM-123 source -p core-lib
    """
    service = build_service(get_settings(ctx))
    config = _load(service, chain)
    _warn_unknown_projects(config, projects)

    service.switch_mode(config, new_mode.value, projects or None)
    _save_or_print(service, config, dry_run)
