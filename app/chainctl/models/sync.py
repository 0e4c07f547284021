"""Mirror synchronization models.

This module defines the unit of work handled by the mirror sync service,
the progress events it publishes, and the per-unit and per-batch results.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SyncOperation(Enum):
    """Kind of batch being run."""

    CLONE = "clone"
    UPDATE = "update"


class SyncEventKind(Enum):
    """Progress event emitted on the sync channel.

    Every unit of work ends with exactly one terminal event: SKIPPED,
    SUCCEEDED, FAILED or CANCELLED. BATCH_COMPLETED is emitted once, after
    all units have settled.
    """

    STARTED = "started"
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    BATCH_COMPLETED = "batch_completed"

    @property
    def is_terminal(self) -> bool:
        """Check if this event settles a unit of work."""
        return self in (
            SyncEventKind.SKIPPED,
            SyncEventKind.SUCCEEDED,
            SyncEventKind.FAILED,
            SyncEventKind.CANCELLED,
        )


class SyncOutcome(Enum):
    """Final state of one unit of work."""

    CLONED = "cloned"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class RepositoryTarget:
    """One repository mirror to clone or update.

    Attributes:
        url: Remote URL, empty for mirrors discovered on disk.
        project: Project name derived from the URL or directory name.
        local_path: Location of the bare mirror.
        fork: Fork label, None for main repositories.
    """

    url: str
    project: str
    local_path: Path
    fork: str | None = None

    @property
    def label(self) -> str:
        """Short display name, e.g. `core-lib` or `jane.doe/core-lib`."""
        if self.fork is None:
            return self.project
        return f"{self.fork}/{self.project}"


@dataclass(frozen=True, slots=True)
class SyncEvent:
    """Progress message published on the sync channel.

    Attributes:
        kind: What happened.
        target: Repository concerned, None for BATCH_COMPLETED.
        message: Human-readable description.
    """

    kind: SyncEventKind
    target: RepositoryTarget | None = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one unit of work.

    Attributes:
        target: Repository the unit worked on.
        outcome: Final state.
        error: Failure detail when outcome is FAILED.
    """

    target: RepositoryTarget
    outcome: SyncOutcome
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the unit failed."""
        return self.outcome == SyncOutcome.FAILED


@dataclass(frozen=True, slots=True)
class SyncSummary:
    """Results of a whole clone-all or update-all batch."""

    operation: SyncOperation
    results: tuple[SyncResult, ...] = field(default_factory=tuple)

    def count(self, outcome: SyncOutcome) -> int:
        """Number of units that ended with the given outcome."""
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> list[SyncResult]:
        """Units that failed."""
        return [r for r in self.results if r.failed]
