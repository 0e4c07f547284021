"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from chainctl.core.theme import get_theme

if TYPE_CHECKING:
    from chainctl.models.chain import ProjectConfiguration


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_chain_table(title: str = "Chain Projects") -> Table:
    """Create a pre-configured table for displaying a chain's projects.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for project display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    # Selection column: icon only, no header text
    table.add_column("", width=2, justify="center")
    table.add_column("Project", no_wrap=True)
    table.add_column("Mode", style="text")
    table.add_column("Fork", overflow="ellipsis")
    table.add_column("Branch", overflow="ellipsis")
    table.add_column("Tag", overflow="ellipsis")
    table.add_column("Tests", justify="center")
    return table


def _format_value(value: str | None, style: str) -> str:
    if not value:
        return "[muted]-[/]"
    return f"[{style}]{value}[/]"


def format_project_row(project: ProjectConfiguration) -> tuple[str, ...]:
    """Format a project as a table row with proper styling.

    Selected projects get a filled circle and bold name; unselected ones
    an empty circle and muted styling.

    Args:
        project: The project to format.

    Returns:
        Tuple of (icon, name, mode, fork, branch, tag, tests) with Rich markup.
    """
    if project.is_selected:
        icon = "[project_selected]●[/]"
        name = f"[project_selected]{project.project_name}[/]"
    else:
        icon = "[project_inactive]○[/]"
        name = f"[project_inactive]{project.project_name}[/]"

    tests = "[success]on[/]" if project.tests_unit else "[muted]off[/]"

    return (
        icon,
        name,
        project.mode,
        _format_value(project.fork, "fork"),
        _format_value(project.branch, "branch"),
        _format_value(project.tag, "tag"),
        tests,
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
