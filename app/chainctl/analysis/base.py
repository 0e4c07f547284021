"""Abstract base class for known-entity sources.

A source scans something (chain files, repository mirrors) and reports
the projects, forks, branches and tags it found.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from chainctl.models.analysis import AnalysisReport

logger = logging.getLogger(__name__)


class KnownEntitySource(ABC):
    """Abstract base class for all known-entity sources.

    Example:
        >>> source = DirectoryChainSource(ChainStorage(Path("~/chains")))
        >>> report = source.collect()
        >>> sorted(report.projects)[:3]
        ['core-lib', 'data-service', 'web-ui']
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in log messages."""

    @abstractmethod
    def collect(self) -> AnalysisReport:
        """Scan the source and return everything it knows about.

        Returns:
            Fresh AnalysisReport.

        Raises:
            RuntimeError: If the source cannot be scanned at all.
        """


class CompositeSource(KnownEntitySource):
    """Union of several sources, e.g. chain files plus mirrors."""

    def __init__(self, sources: Sequence[KnownEntitySource]) -> None:
        if not sources:
            msg = "CompositeSource needs at least one source"
            raise ValueError(msg)
        self._sources = tuple(sources)

    @property
    def name(self) -> str:
        return "+".join(source.name for source in self._sources)

    @property
    def sources(self) -> tuple[KnownEntitySource, ...]:
        return self._sources

    def collect(self) -> AnalysisReport:
        """Collect from every source and merge the results."""
        report = AnalysisReport()
        for source in self._sources:
            report = report.merge(source.collect())
        return report
