"""Known-entity snapshot produced by chain analysis."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from chainctl.models.chain import KNOWN_MODES


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Immutable snapshot of the projects, forks, branches and tags in use.

    Reports are rebuilt wholesale on refresh, never updated in place.

    Attributes:
        projects: Known project names.
        forks: Known fork names.
        branches: Known branch names.
        tags: Known tag names.
    """

    projects: frozenset[str] = field(default_factory=frozenset)
    forks: frozenset[str] = field(default_factory=frozenset)
    branches: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        projects: Iterable[str] = (),
        forks: Iterable[str] = (),
        branches: Iterable[str] = (),
        tags: Iterable[str] = (),
    ) -> AnalysisReport:
        """Create a report from any iterables of names."""
        return cls(
            projects=frozenset(projects),
            forks=frozenset(forks),
            branches=frozenset(branches),
            tags=frozenset(tags),
        )

    def merge(self, other: AnalysisReport) -> AnalysisReport:
        """Return the union of this report and another."""
        return AnalysisReport(
            projects=self.projects | other.projects,
            forks=self.forks | other.forks,
            branches=self.branches | other.branches,
            tags=self.tags | other.tags,
        )

    @property
    def known_modes(self) -> frozenset[str]:
        """Modes accepted by validation; fixed, not derived from files."""
        return KNOWN_MODES

    @property
    def project_count(self) -> int:
        return len(self.projects)

    @property
    def fork_count(self) -> int:
        return len(self.forks)

    @property
    def branch_count(self) -> int:
        return len(self.branches)

    @property
    def tag_count(self) -> int:
        return len(self.tags)

    def to_dict(self) -> dict[str, object]:
        """Convert the report to a JSON-friendly dict with sorted lists."""
        return {
            "projects": sorted(self.projects),
            "forks": sorted(self.forks),
            "branches": sorted(self.branches),
            "tags": sorted(self.tags),
            "counts": {
                "projects": self.project_count,
                "forks": self.fork_count,
                "branches": self.branch_count,
                "tags": self.tag_count,
            },
        }
