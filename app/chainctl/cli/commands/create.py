"""Create command implementation.

Creates a new chain file for a feature ticket, seeded from the feature
template when one exists in the chain directory.
"""

from typing import Annotated

import typer

from chainctl.cli.display import print_chain
from chainctl.cli.types import build_service, get_settings, parse_assignments
from chainctl.core.chain_file import ChainFileError, serialize_chain
from chainctl.models.chain import ProjectMode
from chainctl.models.selection import ProjectSelection
from chainctl.utils.formatting import console, print_error, print_info, print_success


def _build_selections(
    projects: list[str],
    forks: dict[str, str],
    branches: dict[str, str],
    modes: dict[str, str],
    no_tests: set[str],
) -> list[ProjectSelection]:
    """Turn the per-project options into selections, one per project."""
    names = list(dict.fromkeys([*projects, *forks, *branches, *modes, *no_tests]))
    return [
        ProjectSelection(
            project_name=name,
            selected_mode=modes.get(name),
            selected_fork=forks.get(name),
            selected_branch=branches.get(name),
            use_tests=name not in no_tests,
        )
        for name in names
    ]


def _parse_modes(values: list[str] | None) -> dict[str, str]:
    modes = parse_assignments(values, "--mode")
    allowed = {choice.value for choice in ProjectMode}
    for project, value in modes.items():
        if value.lower() not in allowed:
            msg = f"Invalid mode {value!r} for {project}; use one of {', '.join(sorted(allowed))}"
            raise typer.BadParameter(msg, param_hint="--mode")
    return modes


def create(
    ctx: typer.Context,
    ticket: Annotated[
        str,
        typer.Argument(
            help="Ticket id; DEPM- is prepended when missing.",
            show_default=False,
        ),
    ],
    feature: Annotated[
        str | None,
        typer.Option("--feature", "-f", help="Feature name appended to the file name."),
    ] = None,
    projects: Annotated[
        list[str] | None,
        typer.Option("--project", "-p", help="Project to select (repeatable)."),
    ] = None,
    forks: Annotated[
        list[str] | None,
        typer.Option("--fork", help="Fork for a project as PROJECT=FORK (repeatable)."),
    ] = None,
    branches: Annotated[
        list[str] | None,
        typer.Option(
            "--branch",
            "-b",
            help="Branch for a project as PROJECT=BRANCH (repeatable).",
        ),
    ] = None,
    modes: Annotated[
        list[str] | None,
        typer.Option("--mode", "-m", help="Mode for a project as PROJECT=MODE (repeatable)."),
    ] = None,
    no_tests: Annotated[
        list[str] | None,
        typer.Option("--no-tests", help="Project whose unit tests are disabled (repeatable)."),
    ] = None,
    target: Annotated[
        str | None,
        typer.Option(
            "--target",
            "-t",
            help="Project the feature is developed in; gets branch dev/<ticket>.",
        ),
    ] = None,
    version: Annotated[
        str | None,
        typer.Option(
            "--global-version",
            "-g",
            help="Global version. Defaults to the default_version setting.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the new chain file instead of saving it."),
    ] = False,
) -> None:
    """Create a chain file for a feature ticket.

    Examples:
        chainctl create 123 --target core-lib
        chainctl create DEPM-123 -f "login page" -p web-ui --branch web-ui=feature/login
        chainctl create 123 -p core-lib --fork core-lib=alice.smith/core-lib --no-tests core-lib
    """
    selections = _build_selections(
        projects or [],
        parse_assignments(forks, "--fork"),
        parse_assignments(branches, "--branch"),
        _parse_modes(modes),
        set(no_tests or []),
    )

    service = build_service(get_settings(ctx))
    try:
        config = service.create_chain_for_feature(
            ticket,
            selections,
            feature_name=feature,
            target_project=target,
            version=version,
        )
    except ChainFileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not config.selected_projects:
        print_info("No projects selected; the chain is created with every project commented out.")

    if dry_run:
        console.print(serialize_chain(config), end="", markup=False, highlight=False)
        return

    try:
        path = service.save(config)
    except ChainFileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_chain(config)
    print_success(f"Created {path}")
