"""Known entities from the chain files in a directory."""

import logging

from chainctl.analysis.base import KnownEntitySource
from chainctl.core.chain_file import (
    GLOBAL_PREFIX,
    is_template_value,
    split_directive,
    split_project_key,
)
from chainctl.core.storage import ChainStorage
from chainctl.models.analysis import AnalysisReport

logger = logging.getLogger(__name__)


class DirectoryChainSource(KnownEntitySource):
    """Scans every chain file in storage for projects, forks, branches and tags.

    Only active lines count; commented directives and template values
    (`<...>`) never become known entities.
    """

    def __init__(self, storage: ChainStorage) -> None:
        self._storage = storage

    @property
    def name(self) -> str:
        return "directory"

    def collect(self) -> AnalysisReport:
        """Scan all chain files.

        Unreadable files are logged and skipped.

        Returns:
            Report built from every readable chain file.
        """
        projects: set[str] = set()
        forks: set[str] = set()
        branches: set[str] = set()
        tags: set[str] = set()
        by_property = {"fork": forks, "branch": branches, "tag": tags}

        files = self._storage.list_chain_files()
        for path in files:
            try:
                text = self._storage.read_text(path)
            except OSError as e:
                logger.warning("Skipping unreadable chain file %s: %s", path, e)
                continue

            for line in text.splitlines():
                directive = split_directive(line)
                if directive is None:
                    continue
                key, value = directive
                if key.startswith(GLOBAL_PREFIX):
                    continue
                parts = split_project_key(key)
                if parts is None:
                    continue

                project, prop = parts
                projects.add(project)
                target = by_property.get(prop)
                if target is not None and value and not is_template_value(value):
                    target.add(value)

        logger.info(
            "Chain file analysis of %d file(s): %d projects, %d forks, %d branches, %d tags",
            len(files),
            len(projects),
            len(forks),
            len(branches),
            len(tags),
        )
        return AnalysisReport.build(projects, forks, branches, tags)
