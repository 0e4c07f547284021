"""Shared types and utilities for CLI commands.

This module provides common enums and the factories that wire settings
into services, so every command builds them the same way.
"""

from enum import Enum

import typer

from chainctl.analysis.analyzer import ChainAnalyzer
from chainctl.analysis.base import CompositeSource, KnownEntitySource
from chainctl.analysis.directory import DirectoryChainSource
from chainctl.analysis.git import GitMirrorSource
from chainctl.core.registry import RegistryLoader
from chainctl.core.service import ChainService
from chainctl.core.settings import ChainSettings, load_settings_or_default
from chainctl.core.storage import ChainStorage
from chainctl.git.branches import BranchEnumerator
from chainctl.git.layout import MirrorLayout
from chainctl.git.mirrors import MirrorSyncService


class KindChoice(str, Enum):
    """Kinds of known entities that can be listed."""

    PROJECTS = "projects"
    FORKS = "forks"
    BRANCHES = "branches"
    TAGS = "tags"
    MODES = "modes"


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_settings(ctx: typer.Context) -> ChainSettings:
    """Return the settings loaded by the main callback.

    Falls back to the default settings file when the command runs without
    the main callback (e.g. a sub-app invoked directly in tests).
    """
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and isinstance(obj.get("settings"), ChainSettings):
        return obj["settings"]
    return load_settings_or_default()


def build_analysis_source(settings: ChainSettings) -> KnownEntitySource:
    """Build the known-entity source selected by `analysis_source`."""
    directory = DirectoryChainSource(ChainStorage(settings.chains_dir))
    if settings.analysis_source == "directory":
        return directory

    loader = RegistryLoader(settings.registry_path)
    enumerator = BranchEnumerator(MirrorLayout(settings.mirrors_dir))
    git = GitMirrorSource(loader.get, enumerator)
    if settings.analysis_source == "git":
        return git
    return CompositeSource([directory, git])


def build_service(settings: ChainSettings) -> ChainService:
    """Build a ChainService from settings.

    Args:
        settings: Loaded settings.

    Returns:
        Service backed by the configured chain directory and analysis source.
    """
    return ChainService(
        ChainStorage(settings.chains_dir),
        ChainAnalyzer(build_analysis_source(settings)),
        default_version=settings.default_version,
    )


def build_sync_service(settings: ChainSettings) -> MirrorSyncService:
    """Build a MirrorSyncService from settings."""
    return MirrorSyncService(
        MirrorLayout(settings.mirrors_dir),
        RegistryLoader(settings.registry_path).get,
        max_concurrency=settings.max_concurrency,
        timeout=float(settings.git_timeout_seconds),
    )


def parse_assignments(values: list[str] | None, option: str) -> dict[str, str]:
    """Parse repeated `PROJECT=VALUE` option values into a dict.

    Args:
        values: Raw option values.
        option: Option name used in error messages.

    Returns:
        Mapping of project name to value; later entries win.

    Raises:
        typer.BadParameter: If a value is not of the form PROJECT=VALUE.
    """
    result: dict[str, str] = {}
    for raw in values or []:
        project, sep, value = raw.partition("=")
        project = project.strip()
        value = value.strip()
        if not sep or not project or not value:
            msg = f"Expected PROJECT=VALUE, got {raw!r}"
            raise typer.BadParameter(msg, param_hint=option)
        result[project] = value
    return result
