"""Branch enumeration for local mirrors."""

import logging
import subprocess

from chainctl.git.layout import MirrorLayout
from chainctl.utils.shell import CommandRunner, run_command

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"

_HEADS_PREFIX = "refs/heads/"
_REMOTES_PREFIX = f"refs/remotes/{DEFAULT_REMOTE}/"


def parse_ref_list(output: str) -> list[str]:
    """Turn `git for-each-ref --format=%(refname)` output into branch names.

    Local heads and `origin` remote-tracking refs both map to the plain
    branch name; the symbolic `HEAD` ref is dropped.

    Args:
        output: One full ref name per line.

    Returns:
        Sorted, de-duplicated branch names.
    """
    branches: set[str] = set()

    for line in output.splitlines():
        ref = line.strip()
        if not ref:
            continue
        if ref.startswith(_HEADS_PREFIX):
            name = ref[len(_HEADS_PREFIX) :]
        elif ref.startswith(_REMOTES_PREFIX):
            name = ref[len(_REMOTES_PREFIX) :]
        else:
            logger.debug("Ignoring ref outside heads/remotes: %s", ref)
            continue
        if name and name != "HEAD":
            branches.add(name)

    return sorted(branches)


class BranchEnumerator:
    """Lists the branches held by local mirrors.

    Attributes:
        layout: Mirror layout used to locate repositories.
    """

    def __init__(
        self,
        layout: MirrorLayout,
        *,
        runner: CommandRunner = run_command,
        timeout: float = 60.0,
    ) -> None:
        self._layout = layout
        self._runner = runner
        self._timeout = timeout

    @property
    def layout(self) -> MirrorLayout:
        return self._layout

    def branches(self, project: str, fork: str | None = None) -> list[str]:
        """List the branches of one mirror.

        Args:
            project: Project name.
            fork: Fork label, None for the main mirror.

        Returns:
            Sorted branch names; empty if the mirror is absent.

        Raises:
            RuntimeError: If git fails on an existing mirror.
        """
        repo_path = self._layout.mirror_path(project, fork)
        if not repo_path.is_dir():
            logger.debug("No mirror at %s, no branches", repo_path)
            return []

        try:
            result = self._runner(
                [
                    "git",
                    "for-each-ref",
                    "--format=%(refname)",
                    "refs/heads",
                    f"refs/remotes/{DEFAULT_REMOTE}",
                ],
                timeout=self._timeout,
                cwd=str(repo_path),
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            msg = f"Cannot list branches of {repo_path}: {e}"
            raise RuntimeError(msg) from e

        if not result.success:
            msg = f"git for-each-ref failed in {repo_path}: {result.error_text}"
            raise RuntimeError(msg)

        return parse_ref_list(result.stdout)
