"""On-disk layout of the bare repository mirrors.

    <base>/main/<project>.git
    <base>/forks/<fork>/<project>.git
"""

from pathlib import Path

from chainctl.models.registry import RepositoryRegistry, extract_project_name
from chainctl.models.sync import RepositoryTarget

MIRROR_SUFFIX = ".git"


class MirrorLayout:
    """Maps projects and forks to mirror directories.

    Attributes:
        base_dir: Root of the mirror tree.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def main_dir(self) -> Path:
        """Directory holding the main repository mirrors."""
        return self._base_dir / "main"

    @property
    def forks_dir(self) -> Path:
        """Directory holding one sub-directory per fork."""
        return self._base_dir / "forks"

    def mirror_path(self, project: str, fork: str | None = None) -> Path:
        """Mirror directory for a project, optionally within a fork."""
        parent = self.main_dir if fork is None else self.forks_dir / fork
        return parent / f"{project}{MIRROR_SUFFIX}"

    def targets(self, registry: RepositoryRegistry) -> list[RepositoryTarget]:
        """Every registered repository as a unit of work, main ones first.

        Args:
            registry: Repository registry.

        Returns:
            One RepositoryTarget per registered URL.
        """
        targets: list[RepositoryTarget] = []

        for url in registry.main_repositories:
            project = extract_project_name(url)
            targets.append(
                RepositoryTarget(url=url, project=project, local_path=self.mirror_path(project))
            )

        for fork, urls in registry.fork_repositories.items():
            for url in urls:
                project = extract_project_name(url)
                targets.append(
                    RepositoryTarget(
                        url=url,
                        project=project,
                        local_path=self.mirror_path(project, fork),
                        fork=fork,
                    )
                )

        return targets

    def existing_mirrors(self) -> list[RepositoryTarget]:
        """Mirrors present on disk, discovered without the registry.

        Returns:
            Targets for every mirror directory, main ones first, each
            group sorted by path.
        """
        targets: list[RepositoryTarget] = []

        if self.main_dir.is_dir():
            for path in sorted(p for p in self.main_dir.iterdir() if p.is_dir()):
                targets.append(RepositoryTarget(url="", project=_project_of(path), local_path=path))

        if self.forks_dir.is_dir():
            for fork_dir in sorted(p for p in self.forks_dir.iterdir() if p.is_dir()):
                for path in sorted(p for p in fork_dir.iterdir() if p.is_dir()):
                    targets.append(
                        RepositoryTarget(
                            url="",
                            project=_project_of(path),
                            local_path=path,
                            fork=fork_dir.name,
                        )
                    )

        return targets


def _project_of(path: Path) -> str:
    """Project name of a mirror directory (`core-lib.git` -> `core-lib`)."""
    name = path.name
    return name[: -len(MIRROR_SUFFIX)] if name.endswith(MIRROR_SUFFIX) else name
