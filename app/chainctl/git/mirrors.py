"""Parallel clone/update of the bare repository mirrors.

Each registered repository is an independent unit of work run on a
bounded thread pool. Progress is published as SyncEvents on a
queue.Queue supplied by the caller; one repository failing never stops
the others, and nothing is retried.
"""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed

from chainctl.git.layout import MirrorLayout
from chainctl.models.registry import RepositoryRegistry
from chainctl.models.sync import (
    RepositoryTarget,
    SyncEvent,
    SyncEventKind,
    SyncOperation,
    SyncOutcome,
    SyncResult,
    SyncSummary,
)
from chainctl.utils.shell import CommandResult, CommandRunner, run_command

logger = logging.getLogger(__name__)

MAX_CONCURRENCY = 8

# Makes `git fetch --all` refresh the mirror's own branches
MIRROR_FETCH_REFSPEC = "+refs/heads/*:refs/heads/*"

EventChannel = queue.Queue[SyncEvent]


class _Publisher:
    """Publishes events for one batch onto the caller's channel."""

    def __init__(self, events: EventChannel | None) -> None:
        self._events = events

    def __call__(
        self,
        kind: SyncEventKind,
        target: RepositoryTarget | None = None,
        message: str = "",
    ) -> None:
        if kind == SyncEventKind.FAILED:
            logger.warning(message)
        else:
            logger.debug(message)
        if self._events is not None:
            self._events.put(SyncEvent(kind=kind, target=target, message=message))


_Unit = Callable[[RepositoryTarget, _Publisher], SyncResult]


def iter_events(events: EventChannel, timeout: float | None = None) -> Iterator[SyncEvent]:
    """Yield events from a channel until the batch completes.

    Args:
        events: Channel passed to clone_all() or update_all().
        timeout: Maximum seconds to wait for each event; None waits forever.

    Yields:
        SyncEvents in publication order, BATCH_COMPLETED last.

    Raises:
        queue.Empty: If no event arrives within the timeout.
    """
    while True:
        event = events.get(timeout=timeout)
        yield event
        if event.kind == SyncEventKind.BATCH_COMPLETED:
            return


class MirrorSyncService:
    """Clones and updates local bare mirrors of every registered repository.

    Attributes:
        layout: Where mirrors live on disk.
        max_concurrency: Upper bound on units of work in flight.

    Example:
        >>> service = MirrorSyncService(layout, registry_loader.get)
        >>> events: queue.Queue[SyncEvent] = queue.Queue()
        >>> summary = service.clone_all(events)
        >>> summary.count(SyncOutcome.FAILED)
        0
    """

    def __init__(
        self,
        layout: MirrorLayout,
        registry: Callable[[], RepositoryRegistry],
        *,
        runner: CommandRunner = run_command,
        max_concurrency: int = MAX_CONCURRENCY,
        timeout: float = 600.0,
    ) -> None:
        """Initialize the service.

        Args:
            layout: Mirror layout.
            registry: Returns the repository registry (e.g. RegistryLoader.get).
            runner: Process runner used for git invocations.
            max_concurrency: Number of worker threads.
            timeout: Timeout in seconds for a single git invocation.
        """
        if max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        self._layout = layout
        self._registry = registry
        self._runner = runner
        self._max_concurrency = max_concurrency
        self._timeout = timeout

    @property
    def layout(self) -> MirrorLayout:
        return self._layout

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    def clone_targets(self) -> list[RepositoryTarget]:
        """Every registered repository, main repositories first.

        Raises:
            RegistryError: If the registry cannot be loaded.
        """
        return self._layout.targets(self._registry())

    def update_targets(self) -> list[RepositoryTarget]:
        """Every mirror currently present on disk."""
        return self._layout.existing_mirrors()

    def clone_all(
        self,
        events: EventChannel | None = None,
        cancel: threading.Event | None = None,
    ) -> SyncSummary:
        """Clone every registered repository that has no mirror yet.

        Args:
            events: Channel receiving progress events.
            cancel: When set, units that have not started are cancelled.

        Returns:
            SyncSummary with one result per registered repository.

        Raises:
            RegistryError: If the registry cannot be loaded.
            OSError: If the mirror directories cannot be created.
        """

        def prepare() -> list[RepositoryTarget]:
            targets = self.clone_targets()
            self._layout.main_dir.mkdir(parents=True, exist_ok=True)
            self._layout.forks_dir.mkdir(parents=True, exist_ok=True)
            return targets

        return self._run_batch(SyncOperation.CLONE, prepare, self._clone, events, cancel)

    def update_all(
        self,
        events: EventChannel | None = None,
        cancel: threading.Event | None = None,
    ) -> SyncSummary:
        """Fetch all remotes for every mirror present on disk.

        Args:
            events: Channel receiving progress events.
            cancel: When set, units that have not started are cancelled.

        Returns:
            SyncSummary with one result per existing mirror.

        Raises:
            OSError: If the mirror directories cannot be read.
        """
        return self._run_batch(
            SyncOperation.UPDATE, self.update_targets, self._update, events, cancel
        )

    def _run_batch(
        self,
        operation: SyncOperation,
        prepare: Callable[[], list[RepositoryTarget]],
        unit: _Unit,
        events: EventChannel | None,
        cancel: threading.Event | None,
    ) -> SyncSummary:
        """Run a batch; BATCH_COMPLETED is published even when it aborts."""
        publish = _Publisher(events)
        try:
            return self._run_units(operation, prepare(), unit, publish, cancel)
        except Exception as e:
            logger.error("%s aborted: %s", operation.value.capitalize(), e)
            publish(
                SyncEventKind.BATCH_COMPLETED,
                message=f"{operation.value.capitalize()} aborted: {e}",
            )
            raise

    def _run_units(
        self,
        operation: SyncOperation,
        targets: list[RepositoryTarget],
        unit: _Unit,
        publish: _Publisher,
        cancel: threading.Event | None,
    ) -> SyncSummary:
        """Run one unit per target on the worker pool and wait for all of them."""
        logger.info(
            "Starting %s of %d repositories (%d in parallel)",
            operation.value,
            len(targets),
            self._max_concurrency,
        )

        results: dict[int, SyncResult] = {}
        with ThreadPoolExecutor(
            max_workers=self._max_concurrency,
            thread_name_prefix=f"mirror-{operation.value}",
        ) as executor:
            futures = {
                executor.submit(self._run_unit, unit, target, publish, cancel): index
                for index, target in enumerate(targets)
            }
            for future in as_completed(futures):
                index = futures[future]
                target = targets[index]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.exception("Unexpected error processing %s", target.label)
                    publish(SyncEventKind.FAILED, target, f"Failed {target.label}: {e}")
                    results[index] = SyncResult(target, SyncOutcome.FAILED, error=str(e))

        summary = SyncSummary(
            operation=operation,
            results=tuple(results[i] for i in range(len(targets))),
        )
        publish(
            SyncEventKind.BATCH_COMPLETED,
            message=(
                f"{operation.value.capitalize()} finished: {summary.total} repositories, "
                f"{len(summary.failed)} failed"
            ),
        )
        logger.info(
            "Finished %s: %d failed of %d", operation.value, len(summary.failed), summary.total
        )
        return summary

    @staticmethod
    def _run_unit(
        unit: _Unit,
        target: RepositoryTarget,
        publish: _Publisher,
        cancel: threading.Event | None,
    ) -> SyncResult:
        """Run one unit unless the batch was cancelled before it started."""
        if cancel is not None and cancel.is_set():
            publish(SyncEventKind.CANCELLED, target, f"Cancelled {target.label}")
            return SyncResult(target, SyncOutcome.CANCELLED)
        return unit(target, publish)

    def _git(self, args: list[str], cwd: str) -> CommandResult:
        return self._runner(["git", *args], timeout=self._timeout, cwd=cwd)

    def _clone(self, target: RepositoryTarget, publish: _Publisher) -> SyncResult:
        """Bare-clone one repository; an existing mirror is skipped."""
        if target.local_path.exists():
            publish(SyncEventKind.SKIPPED, target, f"Skipping {target.label} - already exists")
            return SyncResult(target, SyncOutcome.SKIPPED)

        publish(SyncEventKind.STARTED, target, f"Cloning {target.label}...")
        try:
            target.local_path.parent.mkdir(parents=True, exist_ok=True)
            result = self._git(
                ["clone", "--bare", target.url, str(target.local_path)],
                cwd=str(target.local_path.parent),
            )
            if result.success:
                result = self._git(
                    ["config", "remote.origin.fetch", MIRROR_FETCH_REFSPEC],
                    cwd=str(target.local_path),
                )
        except (OSError, subprocess.TimeoutExpired) as e:
            return self._failed(target, publish, "clone", str(e))

        if not result.success:
            return self._failed(target, publish, "clone", result.error_text)

        publish(SyncEventKind.SUCCEEDED, target, f"Cloned {target.label}")
        return SyncResult(target, SyncOutcome.CLONED)

    def _update(self, target: RepositoryTarget, publish: _Publisher) -> SyncResult:
        """Fetch all remotes of one existing mirror."""
        publish(SyncEventKind.STARTED, target, f"Updating {target.label}...")
        try:
            result = self._git(["fetch", "--all", "--prune"], cwd=str(target.local_path))
        except (OSError, subprocess.TimeoutExpired) as e:
            return self._failed(target, publish, "update", str(e))

        if not result.success:
            return self._failed(target, publish, "update", result.error_text)

        publish(SyncEventKind.SUCCEEDED, target, f"Updated {target.label}")
        return SyncResult(target, SyncOutcome.UPDATED)

    @staticmethod
    def _failed(
        target: RepositoryTarget, publish: _Publisher, verb: str, error: str
    ) -> SyncResult:
        publish(SyncEventKind.FAILED, target, f"Failed to {verb} {target.label}: {error}")
        return SyncResult(target, SyncOutcome.FAILED, error=error)
