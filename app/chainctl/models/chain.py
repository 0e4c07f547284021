"""Chain configuration models.

This module defines the in-memory representation of a chain file: the
global version fields plus one ProjectConfiguration per project.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Modes accepted by the build system, including the legacy combined values
KNOWN_MODES: frozenset[str] = frozenset(
    {"source", "binary", "ignore", "binary,source", "source,binary"}
)


class ProjectMode(str, Enum):
    """Build mode a project can be switched to.

    Attributes:
        SOURCE: Build the project from source.
        BINARY: Consume the project's prebuilt binaries.
        IGNORE: Leave the project out of the chain build.
    """

    SOURCE = "source"
    BINARY = "binary"
    IGNORE = "ignore"


@dataclass(slots=True)
class ProjectConfiguration:
    """Settings for one project within a chain.

    Attributes:
        project_name: Project key, the first segment of every directive.
        mode: Build mode (see KNOWN_MODES).
        mode_devs: Build mode for the "devs" variant.
        fork: Fork override, None means the main repository.
        branch: Branch override, None means the default branch.
        tag: Tag override, None means no pinned tag.
        tests_unit: Whether unit tests run for this project.
        test_sets: Test-set toggles keyed by their `.run` suffix.
        custom_properties: Unrecognized directives, kept verbatim.
        is_selected: Whether directives are written active or commented out.
        tag_enabled: Whether rebase recomputes the tag.
        fork_enabled: Per-field toggle reserved for presentation layers.
        branch_enabled: Per-field toggle reserved for presentation layers.
        tests_enabled: Per-field toggle reserved for presentation layers.
    """

    project_name: str
    mode: str = "source"
    mode_devs: str = "binary"
    fork: str | None = None
    branch: str | None = None
    tag: str | None = None
    tests_unit: bool = True
    test_sets: dict[str, bool] = field(default_factory=dict)
    custom_properties: dict[str, str] = field(default_factory=dict)
    is_selected: bool = True
    tag_enabled: bool = True
    fork_enabled: bool = True
    branch_enabled: bool = True
    tests_enabled: bool = True


@dataclass(slots=True)
class ChainConfiguration:
    """A parsed chain file.

    Attributes:
        identity: Ticket identifier derived from the file name or locator.
        path: File the configuration was loaded from or will be saved to.
        global_version: Value of `global.version.binary`.
        global_devs_version: Value of `global.devs.version.binary`.
        global_properties: Other `global.*` directives in file order.
        projects: Project configurations keyed by project name.
    """

    identity: str = ""
    path: Path | None = None
    global_version: str = ""
    global_devs_version: str = ""
    global_properties: dict[str, str] = field(default_factory=dict)
    projects: dict[str, ProjectConfiguration] = field(default_factory=dict)

    def get_or_create_project(self, project_name: str) -> ProjectConfiguration:
        """Return the named project, creating an empty entry on first use."""
        project = self.projects.get(project_name)
        if project is None:
            project = ProjectConfiguration(project_name=project_name)
            self.projects[project_name] = project
        return project

    def sorted_projects(self) -> list[ProjectConfiguration]:
        """Projects in ascending name order, the order used on disk."""
        return [self.projects[name] for name in sorted(self.projects)]

    @property
    def selected_projects(self) -> list[ProjectConfiguration]:
        """Projects whose directives are written active."""
        return [p for p in self.sorted_projects() if p.is_selected]

    @property
    def project_count(self) -> int:
        """Number of projects in the chain."""
        return len(self.projects)
