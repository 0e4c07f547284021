"""chainctl settings.

Settings are stored in ~/.config/chainctl/config.toml. Every field has a
default, so a missing file simply means default settings.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chainctl.core.paths import (
    get_default_chains_dir,
    get_default_mirrors_dir,
    get_default_registry_path,
    get_settings_path,
)

logger = logging.getLogger(__name__)

# Where the known-entity sets come from
AnalysisSource = Literal["directory", "git", "both"]

DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_GIT_TIMEOUT = 600
DEFAULT_VERSION = "20018"


class ChainSettings(BaseModel):
    """User settings for chainctl.

    Attributes:
        chains_dir: Directory holding the *.properties chain files.
        mirrors_dir: Base directory for bare repository mirrors.
        registry_path: Repository registry file (TOML or JSON).
        max_concurrency: Number of mirror operations run in parallel.
        git_timeout_seconds: Timeout for a single git invocation.
        analysis_source: Where known projects/forks/branches/tags come from.
        default_version: Global version written into new feature chains.
    """

    model_config = ConfigDict(extra="forbid")

    chains_dir: Annotated[
        Path,
        Field(default_factory=get_default_chains_dir, description="Chain file directory"),
    ]
    mirrors_dir: Annotated[
        Path,
        Field(default_factory=get_default_mirrors_dir, description="Bare mirror directory"),
    ]
    registry_path: Annotated[
        Path,
        Field(default_factory=get_default_registry_path, description="Repository registry"),
    ]
    max_concurrency: Annotated[
        int,
        Field(ge=1, le=64, description="Parallel mirror operations (1-64)"),
    ] = DEFAULT_MAX_CONCURRENCY
    git_timeout_seconds: Annotated[
        int,
        Field(ge=10, le=7200, description="Timeout per git invocation in seconds"),
    ] = DEFAULT_GIT_TIMEOUT
    analysis_source: Annotated[
        AnalysisSource,
        Field(description="Known-entity source: directory, git or both"),
    ] = "directory"
    default_version: Annotated[
        str,
        Field(min_length=1, description="Global version for new feature chains"),
    ] = DEFAULT_VERSION


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> ChainSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated ChainSettings object.

    Raises:
        SettingsNotFoundError: If the settings file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    for key in ("chains_dir", "mirrors_dir", "registry_path"):
        if isinstance(data.get(key), str):
            data[key] = Path(data[key]).expanduser()

    try:
        return ChainSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def load_settings_or_default(path: Path | None = None) -> ChainSettings:
    """Load settings, falling back to defaults when no file exists.

    Raises:
        SettingsError: If the file exists but is invalid.
    """
    try:
        return load_settings(path)
    except SettingsNotFoundError:
        logger.debug("No settings file, using defaults")
        return ChainSettings()


def save_settings(settings: ChainSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The ChainSettings object to save.
        path: Path to save the settings. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: ChainSettings) -> dict[str, object]:
    """Convert settings to a dict for TOML, leaving out default values.

    Args:
        settings: The ChainSettings to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    defaults = ChainSettings()
    result: dict[str, object] = {}

    for name in ChainSettings.model_fields:
        value = getattr(settings, name)
        if value == getattr(defaults, name):
            continue
        result[name] = str(value) if isinstance(value, Path) else value

    return result
