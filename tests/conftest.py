"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture
def sample_chain_text() -> str:
    """Chain file text exactly as serialize_chain() writes it."""
    return """# Chain configuration file

global.version.binary=20018
global.devs.version.binary=20018
global.build.flavor=release

core-lib.mode=source
core-lib.mode.devs=binary
core-lib.fork=alice.smith/core-lib
core-lib.branch=feature/login
#core-lib.tag=Build_12.25.1.20018
core-lib.tests.unit=true
core-lib.integration.run=false
core-lib.build.opts=fast

web-ui.mode=binary
web-ui.mode.devs=binary
#web-ui.fork=<firstname.lastname>/web-ui
#web-ui.branch=integration
web-ui.tag=Build_12.25.1.20017
web-ui.tests.unit=false
"""


@pytest.fixture
def template_chain_text() -> str:
    """Feature template with placeholder fork/branch values."""
    return """# Chain configuration file

global.version.binary=20018
global.devs.version.binary=20018

core-lib.mode=source
core-lib.fork=<firstname.lastname>/core-lib
core-lib.branch=<branch>
core-lib.tests.unit=true

data-service.mode=binary
data-service.tests.unit=true

web-ui.mode=source
web-ui.tests.unit=true
"""


@pytest.fixture
def registry_toml() -> str:
    """Repository registry with two main repositories and one fork."""
    return """main = [
    "git@git.example.com:platform/core-lib.git",
    "git@git.example.com:platform/web-ui.git",
]

[forks]
"alice.smith" = ["git@git.example.com:alice.smith/core-lib.git"]
"""


@pytest.fixture
def chains_dir(tmp_path: Path, sample_chain_text: str) -> Path:
    """Chain directory holding one chain file."""
    directory = tmp_path / "chains"
    directory.mkdir()
    (directory / "DEPM-100-login.properties").write_text(sample_chain_text)
    return directory


@pytest.fixture
def registry_path(tmp_path: Path, registry_toml: str) -> Path:
    """Registry file written to a temporary directory."""
    path = tmp_path / "repositories.toml"
    path.write_text(registry_toml)
    return path


@pytest.fixture
def settings_file(tmp_path: Path, chains_dir: Path, registry_path: Path) -> Path:
    """Settings file pointing every directory into the temporary tree."""
    path = tmp_path / "config.toml"
    path.write_text(
        f'chains_dir = "{chains_dir}"\n'
        f'mirrors_dir = "{tmp_path / "mirrors"}"\n'
        f'registry_path = "{registry_path}"\n'
    )
    return path
