"""Shared Rich display functions for chains, analysis and sync results."""

from rich.table import Table

from chainctl.models.analysis import AnalysisReport
from chainctl.models.chain import ChainConfiguration
from chainctl.models.sync import SyncOutcome, SyncSummary
from chainctl.utils.formatting import console, create_chain_table, format_project_row

_OUTCOME_STYLES: dict[SyncOutcome, str] = {
    SyncOutcome.CLONED: "success",
    SyncOutcome.UPDATED: "success",
    SyncOutcome.SKIPPED: "muted",
    SyncOutcome.FAILED: "error",
    SyncOutcome.CANCELLED: "warning",
}


def print_chain(config: ChainConfiguration) -> None:
    """Print a chain's global settings followed by its project table."""
    console.print(f"[bold_header]{config.identity or '(no identity)'}[/]")
    if config.path is not None:
        console.print(f"[muted]{config.path}[/]")
    console.print(f"  Version:      [tag]{config.global_version or '-'}[/]")
    console.print(f"  Devs version: [tag]{config.global_devs_version or '-'}[/]")
    for key, value in config.global_properties.items():
        console.print(f"  [muted]{key}[/] = {value}")
    console.print()

    table = create_chain_table(f"Projects ({config.project_count})")
    for project in config.sorted_projects():
        table.add_row(*format_project_row(project))
    console.print(table)


def create_errors_table(errors: tuple[str, ...] | list[str]) -> Table:
    """Create a Rich table listing validation errors.

    Args:
        errors: Error messages in report order.

    Returns:
        Rich Table with one numbered row per error.
    """
    table = Table(
        title="Validation Errors",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted", width=4)
    table.add_column("Error", style="error")
    for index, error in enumerate(errors, start=1):
        table.add_row(str(index), error)
    return table


def create_report_table(report: AnalysisReport) -> Table:
    """Create a Rich table summarizing an analysis report."""
    table = Table(
        title="Known Entities",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Kind", no_wrap=True)
    table.add_column("Count", justify="right", style="info")
    table.add_column("Examples", style="muted", overflow="ellipsis")

    rows = (
        ("Projects", report.projects),
        ("Forks", report.forks),
        ("Branches", report.branches),
        ("Tags", report.tags),
        ("Modes", report.known_modes),
    )
    for label, values in rows:
        names = sorted(values)
        preview = ", ".join(names[:5])
        if len(names) > 5:
            preview += ", ..."
        table.add_row(label, str(len(names)), preview or "-")
    return table


def create_sync_table(summary: SyncSummary, only_problems: bool = True) -> Table:
    """Create a Rich table of per-repository sync results.

    Args:
        summary: Finished batch.
        only_problems: Only list failed and cancelled repositories.

    Returns:
        Rich Table with one row per listed repository.
    """
    table = Table(
        title=f"{summary.operation.value.capitalize()} Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=10)
    table.add_column("Repository", no_wrap=True)
    table.add_column("Message", style="muted")

    for result in summary.results:
        if only_problems and result.outcome not in (SyncOutcome.FAILED, SyncOutcome.CANCELLED):
            continue
        style = _OUTCOME_STYLES[result.outcome]
        table.add_row(
            f"[{style}]{result.outcome.value}[/]",
            result.target.label,
            result.error or "",
        )
    return table


def print_sync_summary(summary: SyncSummary) -> None:
    """Print outcome counts for a finished batch."""
    parts = [
        f"{summary.count(outcome)} {outcome.value}"
        for outcome in SyncOutcome
        if summary.count(outcome)
    ]
    console.print(f"\n[dim]{summary.total} repositories: {', '.join(parts) or 'nothing to do'}[/]")
