"""Chain validation against the known-entity sets.

Every check runs independently and contributes at most one message, so a
single pass reports all problems in a chain. Validation never raises:
failures are returned as data in a ValidationResult.
"""

from dataclasses import dataclass, field

from chainctl.core.chain_file import is_template_value
from chainctl.models.analysis import AnalysisReport
from chainctl.models.chain import KNOWN_MODES, ChainConfiguration

# Branches accepted even when no mirror or chain file mentions them
BRANCH_PREFIXES: tuple[str, ...] = ("dev/", "feature/", "bugfix/", "hotfix/")
BRANCH_NAMES: frozenset[str] = frozenset({"integration", "master", "main"})

_PROJECT_HINT_LIMIT = 5


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one chain.

    Attributes:
        errors: Human-readable problems, in check order.
    """

    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        """True when no check reported a problem."""
        return not self.errors


def validate_mode(mode: str) -> str | None:
    """Check a mode against the fixed set of known modes.

    Returns:
        Error message, or None if the mode is known.
    """
    if mode in KNOWN_MODES:
        return None
    return f"Invalid mode '{mode}'. Valid modes: {', '.join(sorted(KNOWN_MODES))}"


def validate_project(project_name: str, report: AnalysisReport) -> str | None:
    """Check a project name against the known projects."""
    if not project_name:
        return "Project name cannot be empty"
    if project_name in report.projects:
        return None
    hint = ", ".join(sorted(report.projects)[:_PROJECT_HINT_LIMIT])
    return f"Unknown project '{project_name}'. Known projects: {hint}..."


def validate_fork(fork: str | None, report: AnalysisReport) -> str | None:
    """Check a fork against the known forks or the `owner/repo` shape."""
    if not fork or fork in report.forks:
        return None
    if fork.startswith("<") and fork.endswith(">"):
        return (
            f"Template fork '{fork}' should be commented out or replaced with actual fork name"
        )
    if fork.count("/") == 1:
        return None
    return f"Unknown fork '{fork}'. Consider using a known fork pattern"


def validate_branch(branch: str | None, report: AnalysisReport) -> str | None:
    """Check a branch against the known branches or conventional names."""
    if not branch or is_template_value(branch) or branch in report.branches:
        return None
    if branch in BRANCH_NAMES or branch.startswith(BRANCH_PREFIXES):
        return None
    return f"Unknown branch '{branch}'. Consider using a known branch pattern"


def validate_tag(tag: str | None, report: AnalysisReport) -> str | None:
    """Check a tag against the known tags."""
    if not tag or is_template_value(tag) or tag in report.tags:
        return None
    return f"Unknown tag '{tag}'. Consider using a known tag pattern"


def validate_chain(config: ChainConfiguration, report: AnalysisReport) -> ValidationResult:
    """Validate a chain against an analysis report.

    Args:
        config: Chain to validate.
        report: Known-entity snapshot to validate against.

    Returns:
        ValidationResult listing every problem found.
    """
    errors: list[str] = []

    if not config.identity:
        errors.append("Missing JIRA ID")
    if not config.projects:
        errors.append("No projects found")

    for project in config.projects.values():
        name = project.project_name
        checks = (
            validate_mode(project.mode),
            validate_project(name, report),
            validate_fork(project.fork, report),
            validate_branch(project.branch, report),
            validate_tag(project.tag, report),
        )
        errors.extend(f"{name}: {error}" for error in checks if error)

    return ValidationResult(errors=tuple(errors))
