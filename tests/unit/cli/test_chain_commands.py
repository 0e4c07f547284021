"""Unit tests for the chain file commands.

Tests for chainctl show, validate, rebase, tests and mode.
"""

from pathlib import Path

import pytest
from chainctl.cli.main import app
from chainctl.models.chain import ProjectMode
from click.testing import Result
from typer.testing import CliRunner

runner = CliRunner()

CHAIN = "DEPM-100-login"


@pytest.fixture
def chain_path(chains_dir: Path) -> Path:
    return chains_dir / f"{CHAIN}.properties"


def invoke(settings_file: Path, *args: str) -> Result:
    return runner.invoke(app, ["--config", str(settings_file), *args])


class TestShow:
    """Tests for chainctl show."""

    def test_show(self, settings_file: Path) -> None:
        result = invoke(settings_file, "show", CHAIN)

        assert result.exit_code == 0
        assert CHAIN in result.output
        assert "core-lib" in result.output
        assert "web-ui" in result.output

    def test_show_by_path(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "show", str(chain_path))

        assert result.exit_code == 0
        assert "20018" in result.output

    def test_missing_chain(self, settings_file: Path) -> None:
        result = invoke(settings_file, "show", "DEPM-404")

        assert result.exit_code == 1
        assert "not found" in result.output


class TestValidate:
    """Tests for chainctl validate."""

    def test_valid_chain(self, settings_file: Path) -> None:
        result = invoke(settings_file, "validate", CHAIN)

        assert result.exit_code == 0
        assert "is valid (2 projects)" in result.output

    def test_invalid_chain(self, settings_file: Path, chains_dir: Path) -> None:
        (chains_dir / "DEPM-101.properties").write_text(
            "core-lib.mode=turbo\ncore-lib.fork=<firstname.lastname>\n"
        )

        result = invoke(settings_file, "validate", "DEPM-101")

        assert result.exit_code == 1
        assert "Validation Errors" in result.output
        assert "DEPM-101 has 2 error(s)" in result.output

    def test_analysis_failure(self, tmp_path: Path, chains_dir: Path) -> None:
        """A git analysis source without a registry fails cleanly."""
        config = tmp_path / "git.toml"
        config.write_text(
            f'chains_dir = "{chains_dir}"\n'
            f'registry_path = "{tmp_path / "missing.toml"}"\n'
            'analysis_source = "git"\n'
        )

        result = invoke(config, "validate", CHAIN)

        assert result.exit_code == 1
        assert "Analysis failed" in result.output


class TestRebase:
    """Tests for chainctl rebase."""

    def test_rebase_saves(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "rebase", CHAIN, "20019", "-P", "web-ui=20010")

        assert result.exit_code == 0
        assert "Saved" in result.output
        text = chain_path.read_text()
        assert "global.version.binary=20019\n" in text
        assert "global.devs.version.binary=20019\n" in text
        assert "core-lib.tag=Build_12.25.1.20019\n" in text
        assert "web-ui.tag=Build_12.25.1.20010\n" in text

    def test_dry_run(self, settings_file: Path, chain_path: Path, sample_chain_text: str) -> None:
        result = invoke(settings_file, "rebase", CHAIN, "20019", "--dry-run")

        assert result.exit_code == 0
        assert "global.version.binary=20019" in result.output
        assert chain_path.read_text() == sample_chain_text

    def test_bad_override(self, settings_file: Path) -> None:
        result = invoke(settings_file, "rebase", CHAIN, "20019", "-P", "web-ui")

        assert result.exit_code == 2

    def test_unknown_override_project_warns(self, settings_file: Path) -> None:
        result = invoke(settings_file, "rebase", CHAIN, "20019", "-P", "ghost=1", "--dry-run")

        assert result.exit_code == 0
        assert "ghost" in result.output


class TestTests:
    """Tests for chainctl tests."""

    def test_disable_one_project(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "tests", CHAIN, "--disable", "-p", "core-lib")

        assert result.exit_code == 0
        assert "core-lib.tests.unit=false\n" in chain_path.read_text()

    def test_enable_all(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "tests", CHAIN, "--enable")

        assert result.exit_code == 0
        text = chain_path.read_text()
        assert "core-lib.tests.unit=true\n" in text
        assert "web-ui.tests.unit=true\n" in text

    def test_flag_required(self, settings_file: Path) -> None:
        result = invoke(settings_file, "tests", CHAIN)

        assert result.exit_code == 1
        assert "Specify --enable or --disable" in result.output

    def test_unknown_project_warns(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "tests", CHAIN, "--disable", "-p", "ghost")

        assert result.exit_code == 0
        assert "not part of" in result.output
        assert "core-lib.tests.unit=true\n" in chain_path.read_text()


class TestMode:
    """Tests for chainctl mode."""

    def test_switch_one_project(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "mode", CHAIN, "binary", "-p", "core-lib")

        assert result.exit_code == 0
        text = chain_path.read_text()
        assert "core-lib.mode=binary\n" in text
        assert "web-ui.mode=binary\n" in text

    @pytest.mark.parametrize("mode", list(ProjectMode))
    def test_every_project_mode_accepted(
        self, settings_file: Path, chain_path: Path, mode: ProjectMode
    ) -> None:
        result = invoke(settings_file, "mode", CHAIN, mode.value, "-p", "web-ui")

        assert result.exit_code == 0
        assert f"web-ui.mode={mode.value}\n" in chain_path.read_text()

    def test_case_insensitive(self, settings_file: Path, chain_path: Path) -> None:
        result = invoke(settings_file, "mode", CHAIN, "IGNORE")

        assert result.exit_code == 0
        assert "core-lib.mode=ignore\n" in chain_path.read_text()

    def test_invalid_mode(self, settings_file: Path) -> None:
        result = invoke(settings_file, "mode", CHAIN, "turbo")

        assert result.exit_code == 2
