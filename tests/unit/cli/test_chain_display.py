"""Unit tests for cli/display.py.

Tests for the Rich tables used by the chain, analysis and mirror commands.
"""

import io
from pathlib import Path

import pytest
from chainctl.cli.display import (
    create_errors_table,
    create_report_table,
    create_sync_table,
    print_chain,
    print_sync_summary,
)
from chainctl.core.chain_file import parse_chain_text
from chainctl.core.theme import get_theme
from chainctl.models.analysis import AnalysisReport
from chainctl.models.sync import (
    RepositoryTarget,
    SyncOperation,
    SyncOutcome,
    SyncResult,
    SyncSummary,
)
from rich.console import Console
from rich.table import Table


@pytest.fixture
def summary() -> SyncSummary:
    """Clone batch with one success, one failure and one cancellation."""

    def target(name: str) -> RepositoryTarget:
        return RepositoryTarget(url=f"git@h:p/{name}.git", project=name, local_path=Path(name))

    return SyncSummary(
        operation=SyncOperation.CLONE,
        results=(
            SyncResult(target("core-lib"), SyncOutcome.CLONED),
            SyncResult(target("web-ui"), SyncOutcome.FAILED, error="repository not found"),
            SyncResult(target("search"), SyncOutcome.CANCELLED),
        ),
    )


def _render(table: Table) -> str:
    buf = io.StringIO()
    Console(theme=get_theme(), file=buf, color_system=None, width=160).print(table)
    return buf.getvalue()


def _capture_console_output(func: object, *args: object) -> str:
    """Capture output of a display function by swapping the module console."""
    import chainctl.cli.display as display_mod

    buf = io.StringIO()
    test_console = Console(theme=get_theme(), file=buf, color_system=None, width=160)

    original = display_mod.console
    display_mod.console = test_console
    try:
        func(*args)  # type: ignore[operator]
    finally:
        display_mod.console = original

    return buf.getvalue()


class TestPrintChain:
    """Tests for print_chain."""

    def test_shows_globals_and_projects(self, sample_chain_text: str) -> None:
        config = parse_chain_text(sample_chain_text, "DEPM-100-login.properties")

        output = _capture_console_output(print_chain, config)

        assert "DEPM-100-login" in output
        assert "20018" in output
        assert "global.build.flavor" in output
        assert "alice.smith/core-lib" in output
        assert "feature/login" in output
        assert "Projects (2)" in output

    def test_unselected_project_icon(self, sample_chain_text: str) -> None:
        config = parse_chain_text(sample_chain_text, "DEPM-100-login.properties")
        config.projects["web-ui"].is_selected = False

        output = _capture_console_output(print_chain, config)

        assert "●" in output
        assert "○" in output


class TestCreateErrorsTable:
    """Tests for create_errors_table."""

    def test_numbered_rows(self) -> None:
        table = create_errors_table(["core-lib: Invalid mode 'turbo'", "Missing JIRA ID"])

        assert table.row_count == 2
        output = _render(table)
        assert "Validation Errors" in output
        assert "Invalid mode 'turbo'" in output
        assert "Missing JIRA ID" in output


class TestCreateReportTable:
    """Tests for create_report_table."""

    def test_counts_and_preview(self) -> None:
        report = AnalysisReport.build(
            projects=[f"project-{i}" for i in range(7)],
            forks=["bob/core-lib"],
        )

        output = _render(create_report_table(report))

        assert "Known Entities" in output
        assert "project-0, project-1, project-2, project-3, project-4, ..." in output
        assert "bob/core-lib" in output
        assert "project-6" not in output


class TestSyncDisplay:
    """Tests for create_sync_table and print_sync_summary."""

    def test_only_problems(self, summary: SyncSummary) -> None:
        table = create_sync_table(summary)

        assert table.row_count == 2
        output = _render(table)
        assert "Clone Results" in output
        assert "repository not found" in output
        assert "core-lib" not in output

    def test_all_rows(self, summary: SyncSummary) -> None:
        assert create_sync_table(summary, only_problems=False).row_count == 3

    def test_summary_counts(self, summary: SyncSummary) -> None:
        output = _capture_console_output(print_sync_summary, summary)

        assert "3 repositories: 1 cloned, 1 failed, 1 cancelled" in output

    def test_summary_nothing_to_do(self) -> None:
        output = _capture_console_output(
            print_sync_summary, SyncSummary(operation=SyncOperation.UPDATE)
        )

        assert "0 repositories: nothing to do" in output
