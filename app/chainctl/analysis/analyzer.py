"""Cached analysis of known entities.

The analyzer wraps a KnownEntitySource and keeps its last report until
something invalidates it (typically a chain file save). Rebuilds happen
lazily on the next read, under a lock, so concurrent readers never see a
half-built report and never trigger more than one scan.
"""

import logging
import threading

from chainctl.analysis.base import KnownEntitySource
from chainctl.models.analysis import AnalysisReport

logger = logging.getLogger(__name__)


class ChainAnalyzer:
    """Lazily rebuilt, thread-safe cache over a known-entity source.

    Example:
        >>> analyzer = ChainAnalyzer(DirectoryChainSource(storage))
        >>> analyzer.known_forks()
        ['alice.smith/core-lib']
        >>> analyzer.invalidate()  # next read rescans
    """

    def __init__(self, source: KnownEntitySource) -> None:
        self._source = source
        self._lock = threading.Lock()
        self._report = AnalysisReport()
        self._stale = True

    @property
    def source(self) -> KnownEntitySource:
        return self._source

    @property
    def is_stale(self) -> bool:
        with self._lock:
            return self._stale

    def invalidate(self) -> None:
        """Mark the cached report stale; the next read rebuilds it."""
        with self._lock:
            self._stale = True
        logger.debug("Analysis cache invalidated")

    def report(self) -> AnalysisReport:
        """Return the current report, rebuilding it first if stale.

        Raises:
            Whatever the source raises while scanning. The cache stays
            stale in that case.
        """
        with self._lock:
            if self._stale:
                self._report = self._source.collect()
                self._stale = False
                logger.info(
                    "Analysis rebuilt from %s: %d projects, %d forks, %d branches, %d tags",
                    self._source.name,
                    self._report.project_count,
                    self._report.fork_count,
                    self._report.branch_count,
                    self._report.tag_count,
                )
            return self._report

    def refresh(self) -> AnalysisReport:
        """Force a rescan and return the new report."""
        self.invalidate()
        return self.report()

    def known_projects(self) -> list[str]:
        return sorted(self.report().projects)

    def known_forks(self) -> list[str]:
        return sorted(self.report().forks)

    def known_branches(self) -> list[str]:
        return sorted(self.report().branches)

    def known_tags(self) -> list[str]:
        return sorted(self.report().tags)

    def known_modes(self) -> list[str]:
        return sorted(self.report().known_modes)
