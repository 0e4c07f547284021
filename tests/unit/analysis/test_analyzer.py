"""Unit tests for ChainAnalyzer caching."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from chainctl.analysis.analyzer import ChainAnalyzer
from chainctl.analysis.base import KnownEntitySource
from chainctl.models.analysis import AnalysisReport


class CountingSource(KnownEntitySource):
    """Source that counts collect() calls and returns a growing report."""

    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self._delay = delay
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "counting"

    def collect(self) -> AnalysisReport:
        with self._lock:
            self.calls += 1
            n = self.calls
        time.sleep(self._delay)
        return AnalysisReport.build(
            projects=[f"project-{i}" for i in range(n)],
            forks=["bob/core-lib"],
            branches=["main", "develop"],
            tags=["Build_12.25.1.20018"],
        )


class FailingSource(KnownEntitySource):
    @property
    def name(self) -> str:
        return "failing"

    def collect(self) -> AnalysisReport:
        raise RuntimeError("mirror unreadable")


class TestChainAnalyzer:
    """Tests for ChainAnalyzer."""

    def test_lazy(self) -> None:
        """Nothing is scanned until the first read."""
        source = CountingSource()
        analyzer = ChainAnalyzer(source)

        assert source.calls == 0
        assert analyzer.is_stale

    def test_cached_between_reads(self) -> None:
        source = CountingSource()
        analyzer = ChainAnalyzer(source)

        first = analyzer.report()
        second = analyzer.report()

        assert first is second
        assert source.calls == 1
        assert not analyzer.is_stale

    def test_invalidate_rebuilds_on_next_read(self) -> None:
        source = CountingSource()
        analyzer = ChainAnalyzer(source)
        analyzer.report()

        analyzer.invalidate()

        assert source.calls == 1
        assert analyzer.report().project_count == 2
        assert source.calls == 2

    def test_refresh(self) -> None:
        source = CountingSource()
        analyzer = ChainAnalyzer(source)
        analyzer.report()

        report = analyzer.refresh()

        assert source.calls == 2
        assert report.project_count == 2

    def test_sorted_accessors(self) -> None:
        analyzer = ChainAnalyzer(CountingSource())

        assert analyzer.known_projects() == ["project-0"]
        assert analyzer.known_forks() == ["bob/core-lib"]
        assert analyzer.known_branches() == ["develop", "main"]
        assert analyzer.known_tags() == ["Build_12.25.1.20018"]
        assert analyzer.known_modes() == [
            "binary",
            "binary,source",
            "ignore",
            "source",
            "source,binary",
        ]

    def test_failure_leaves_cache_stale(self) -> None:
        analyzer = ChainAnalyzer(FailingSource())

        with pytest.raises(RuntimeError, match="mirror unreadable"):
            analyzer.report()

        assert analyzer.is_stale

    def test_concurrent_readers_collect_once(self) -> None:
        """Readers racing on a stale cache trigger a single scan."""
        source = CountingSource(delay=0.05)
        analyzer = ChainAnalyzer(source)

        with ThreadPoolExecutor(max_workers=8) as executor:
            reports = list(executor.map(lambda _: analyzer.report(), range(16)))

        assert source.calls == 1
        assert all(report is reports[0] for report in reports)
