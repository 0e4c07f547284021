"""Known entities from the registry and the local mirrors."""

import logging
from collections.abc import Callable

from chainctl.analysis.base import KnownEntitySource
from chainctl.git.branches import BranchEnumerator
from chainctl.models.analysis import AnalysisReport
from chainctl.models.registry import RepositoryRegistry, extract_project_name

logger = logging.getLogger(__name__)


class GitMirrorSource(KnownEntitySource):
    """Projects and forks from the registry, branches from the mirrors.

    Every registered URL contributes its project name; every fork label
    is a known fork. Branches come from each repository's local mirror,
    so a repository that was never cloned contributes no branches.
    """

    def __init__(
        self,
        registry: Callable[[], RepositoryRegistry],
        enumerator: BranchEnumerator,
    ) -> None:
        """Initialize the source.

        Args:
            registry: Returns the repository registry (e.g. RegistryLoader.get).
            enumerator: Lists branches of a mirror.
        """
        self._registry = registry
        self._enumerator = enumerator

    @property
    def name(self) -> str:
        return "git"

    def collect(self) -> AnalysisReport:
        """Walk the registry and enumerate each mirror's branches.

        Raises:
            RegistryError: If the registry cannot be loaded.
            RuntimeError: If git fails on an existing mirror.
        """
        registry = self._registry()
        projects: set[str] = set()
        forks: set[str] = set()
        branches: set[str] = set()

        for url in registry.main_repositories:
            project = extract_project_name(url)
            projects.add(project)
            branches.update(self._enumerator.branches(project))

        for fork, urls in registry.fork_repositories.items():
            forks.add(fork)
            for url in urls:
                project = extract_project_name(url)
                projects.add(project)
                branches.update(self._enumerator.branches(project, fork))

        logger.info(
            "Git analysis complete: %d projects, %d forks, %d branches",
            len(projects),
            len(forks),
            len(branches),
        )
        return AnalysisReport.build(projects=projects, forks=forks, branches=branches)
