"""Known-entity commands.

Lists the projects, forks, branches and tags that validation accepts,
as derived from the configured analysis source.
"""

import json
from typing import Annotated

import typer

from chainctl.cli.display import create_report_table
from chainctl.cli.types import KindChoice, OutputFormat, build_service, get_settings
from chainctl.core.registry import RegistryError
from chainctl.core.service import ChainService
from chainctl.models.analysis import AnalysisReport
from chainctl.utils.formatting import console, print_error


def _report(service: ChainService) -> AnalysisReport:
    try:
        return service.get_analysis_report()
    except (RegistryError, RuntimeError) as e:
        print_error(f"Analysis failed: {e}")
        raise typer.Exit(code=1) from e


def known(
    ctx: typer.Context,
    kind: Annotated[
        KindChoice,
        typer.Argument(
            help="What to list: projects, forks, branches, tags or modes.",
            case_sensitive=False,
            show_default=False,
        ),
    ],
) -> None:
    """List known entities of one kind, one per line.

    Examples:
        chainctl known projects
        chainctl known branches | grep feature/
    """
    service = build_service(get_settings(ctx))
    report = _report(service)

    values = {
        KindChoice.PROJECTS: report.projects,
        KindChoice.FORKS: report.forks,
        KindChoice.BRANCHES: report.branches,
        KindChoice.TAGS: report.tags,
        KindChoice.MODES: report.known_modes,
    }[kind]
    for value in sorted(values):
        typer.echo(value)


def analyze(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Scan the analysis source and summarize the known entities."""
    settings = get_settings(ctx)
    service = build_service(settings)
    report = _report(service)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(report.to_dict()))
        return

    console.print(create_report_table(report))
    console.print(f"\n[dim]Source: {service.analyzer.source.name} ({settings.chains_dir})[/]")
