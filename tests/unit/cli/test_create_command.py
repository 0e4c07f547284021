"""Unit tests for chainctl create."""

from pathlib import Path

from chainctl.cli.main import app
from chainctl.core.service import TEMPLATE_FILE_NAME
from click.testing import Result
from typer.testing import CliRunner

runner = CliRunner()


def invoke(settings_file: Path, *args: str) -> Result:
    return runner.invoke(app, ["--config", str(settings_file), "create", *args])


class TestCreate:
    """Tests for chainctl create."""

    def test_create_without_template(self, settings_file: Path, chains_dir: Path) -> None:
        result = invoke(
            settings_file,
            "500",
            "-p",
            "core-lib",
            "--branch",
            "core-lib=feature/x",
            "--no-tests",
            "core-lib",
        )

        assert result.exit_code == 0
        assert "Created" in result.output
        text = (chains_dir / "DEPM-500.properties").read_text()
        assert "global.version.binary=20018\n" in text
        assert "core-lib.mode=source\n" in text
        assert "core-lib.branch=feature/x\n" in text
        assert "core-lib.tests.unit=false\n" in text

    def test_feature_name_in_file_name(self, settings_file: Path, chains_dir: Path) -> None:
        result = invoke(settings_file, "DEPM-501", "-f", "login page", "-p", "web-ui")

        assert result.exit_code == 0
        assert (chains_dir / "DEPM-501-login-page.properties").is_file()

    def test_from_template(
        self, settings_file: Path, chains_dir: Path, template_chain_text: str
    ) -> None:
        """Template projects are written commented out unless selected."""
        (chains_dir / TEMPLATE_FILE_NAME).write_text(template_chain_text)

        result = invoke(
            settings_file,
            "502",
            "--target",
            "core-lib",
            "--mode",
            "web-ui=binary",
            "-p",
            "web-ui",
            "-g",
            "20020",
        )

        assert result.exit_code == 0
        text = (chains_dir / "DEPM-502.properties").read_text()
        assert "global.version.binary=20020\n" in text
        assert "core-lib.branch=dev/DEPM-502\n" in text
        assert "web-ui.mode=binary\n" in text
        assert "#data-service.mode=source\n" in text

    def test_existing_ticket(self, settings_file: Path) -> None:
        result = invoke(settings_file, "100", "-p", "core-lib")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_dry_run(self, settings_file: Path, chains_dir: Path) -> None:
        result = invoke(settings_file, "503", "-p", "core-lib", "--dry-run")

        assert result.exit_code == 0
        assert "core-lib.mode=source" in result.output
        assert not (chains_dir / "DEPM-503.properties").exists()

    def test_no_projects_selected(self, settings_file: Path) -> None:
        result = invoke(settings_file, "504", "--dry-run")

        assert result.exit_code == 0
        assert "No projects selected" in result.output

    def test_invalid_mode(self, settings_file: Path, chains_dir: Path) -> None:
        result = invoke(settings_file, "505", "-m", "core-lib=turbo")

        assert result.exit_code == 2
        assert not (chains_dir / "DEPM-505.properties").exists()

    def test_bad_fork_assignment(self, settings_file: Path) -> None:
        result = invoke(settings_file, "506", "--fork", "alice.smith/core-lib")

        assert result.exit_code == 2
