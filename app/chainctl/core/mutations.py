"""In-place chain mutations.

These functions change a ChainConfiguration without touching storage.
Unknown project names are ignored rather than reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from chainctl.core.chain_file import BUILD_PREFIX, has_real_value
from chainctl.core.storage import CHAIN_SUFFIX
from chainctl.models.chain import ChainConfiguration, ProjectConfiguration, ProjectMode

if TYPE_CHECKING:
    from chainctl.models.selection import ProjectSelection

logger = logging.getLogger(__name__)

TICKET_PREFIX = "DEPM-"
FEATURE_BRANCH_PREFIX = "dev/"


def _existing_projects(
    config: ChainConfiguration, project_names: Iterable[str] | None
) -> list[ProjectConfiguration]:
    """Resolve project names to configurations, None meaning all projects."""
    if project_names is None:
        return list(config.projects.values())
    return [config.projects[name] for name in project_names if name in config.projects]


def rebase_chain(
    config: ChainConfiguration,
    new_version: str,
    project_versions: Mapping[str, str] | None = None,
) -> None:
    """Move a chain to a new global version.

    Both global version fields are set to `new_version`. Every project
    with tag_enabled gets its tag recomputed from the build prefix and
    either its entry in `project_versions` or the new version.

    Args:
        config: Chain to rebase.
        new_version: New global version.
        project_versions: Optional per-project version overrides.
    """
    overrides = project_versions or {}
    config.global_version = new_version
    config.global_devs_version = new_version

    for project in config.projects.values():
        if project.tag_enabled:
            version = overrides.get(project.project_name, new_version)
            project.tag = f"{BUILD_PREFIX}{version}"

    logger.debug("Rebased chain %s to version %s", config.identity, new_version)


def toggle_tests(
    config: ChainConfiguration,
    enabled: bool,
    project_names: Iterable[str] | None = None,
) -> None:
    """Enable or disable unit tests.

    Args:
        config: Chain to change.
        enabled: New tests.unit value.
        project_names: Projects to change. If None, changes every project.
    """
    for project in _existing_projects(config, project_names):
        project.tests_unit = enabled


def switch_mode(
    config: ChainConfiguration,
    mode: ProjectMode | str,
    project_names: Iterable[str] | None = None,
) -> None:
    """Set the build mode.

    Args:
        config: Chain to change.
        mode: New mode; stored lower-cased.
        project_names: Projects to change. If None, changes every project.
    """
    mode_value = mode.value if isinstance(mode, ProjectMode) else str(mode).lower()
    for project in _existing_projects(config, project_names):
        project.mode = mode_value


def normalize_ticket_id(ticket_id: str) -> str:
    """Prefix a ticket id with `DEPM-` unless it already carries it."""
    ticket_id = ticket_id.strip()
    if ticket_id.startswith(TICKET_PREFIX):
        return ticket_id
    return f"{TICKET_PREFIX}{ticket_id}"


def feature_file_name(ticket_id: str, feature_name: str | None = None) -> str:
    """Build the chain file name for a feature.

    Args:
        ticket_id: Normalized ticket id.
        feature_name: Optional feature description; spaces and
            underscores become hyphens.

    Returns:
        `<ticket>.properties` or `<ticket>-<feature>.properties`.
    """
    if not feature_name:
        return f"{ticket_id}{CHAIN_SUFFIX}"
    slug = feature_name.strip().replace(" ", "-").replace("_", "-")
    return f"{ticket_id}-{slug}{CHAIN_SUFFIX}"


def create_chain_for_feature(
    ticket_id: str,
    selections: Iterable[ProjectSelection],
    *,
    template: ChainConfiguration | None = None,
    target_project: str | None = None,
    version: str = "",
) -> ChainConfiguration:
    """Build a new chain for a feature ticket.

    Every template project is seeded unselected in source mode with unit
    tests on. Selections are then applied to matching projects; without a
    template, selected projects are added as new entries. The target
    project is always selected and its branch set to `dev/<ticket>`.

    Args:
        ticket_id: Ticket id, normalized to carry the `DEPM-` prefix.
        selections: Per-project choices.
        template: Chain whose projects seed the new chain.
        target_project: Project the feature is developed in.
        version: Global version for the new chain.

    Returns:
        The new configuration (not yet saved).
    """
    ticket_id = normalize_ticket_id(ticket_id)
    config = ChainConfiguration(
        identity=ticket_id,
        global_version=version,
        global_devs_version=version,
    )

    if template is not None:
        for name in template.projects:
            config.projects[name] = ProjectConfiguration(project_name=name, is_selected=False)

    for selection in selections:
        project = config.projects.get(selection.project_name)
        if project is None:
            if template is not None or not selection.is_selected:
                logger.debug("Ignoring selection for unknown project %s", selection.project_name)
                continue
            project = config.get_or_create_project(selection.project_name)

        project.is_selected = selection.is_selected
        project.tests_unit = selection.use_tests
        if selection.selected_mode:
            project.mode = selection.selected_mode.lower()

        if selection.is_selected:
            if has_real_value(selection.selected_branch):
                project.branch = selection.selected_branch
            if has_real_value(selection.selected_fork):
                project.fork = selection.selected_fork

    if target_project is not None:
        project = config.projects.get(target_project)
        if project is None and template is None:
            project = config.get_or_create_project(target_project)
        if project is not None:
            project.is_selected = True
            project.branch = f"{FEATURE_BRANCH_PREFIX}{ticket_id}"
        else:
            logger.warning("Target project %s is not part of the template", target_project)

    return config
