"""Per-project choices made when creating a feature chain."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProjectSelection:
    """What the caller picked for one project of a new feature chain.

    Attributes:
        project_name: Project the selection applies to.
        is_selected: Whether the project's directives are written active.
        selected_mode: Build mode to use, None keeps the default.
        selected_fork: Fork to use, ignored when empty or a template value.
        selected_branch: Branch to use, ignored when empty.
        use_tests: Whether unit tests run for the project.
    """

    project_name: str
    is_selected: bool = True
    selected_mode: str | None = None
    selected_fork: str | None = None
    selected_branch: str | None = None
    use_tests: bool = True

    def __post_init__(self) -> None:
        """Validate selection data after initialization."""
        if not self.project_name:
            msg = "Project name cannot be empty"
            raise ValueError(msg)
