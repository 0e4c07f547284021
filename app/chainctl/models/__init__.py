"""Data models for chainctl.

This module exports the core data structures used throughout the application.
"""

from chainctl.models.analysis import AnalysisReport
from chainctl.models.chain import (
    KNOWN_MODES,
    ChainConfiguration,
    ProjectConfiguration,
    ProjectMode,
)
from chainctl.models.registry import RepositoryRegistry, extract_project_name
from chainctl.models.selection import ProjectSelection
from chainctl.models.sync import (
    RepositoryTarget,
    SyncEvent,
    SyncEventKind,
    SyncOperation,
    SyncOutcome,
    SyncResult,
    SyncSummary,
)

__all__ = [
    "KNOWN_MODES",
    "AnalysisReport",
    "ChainConfiguration",
    "ProjectConfiguration",
    "ProjectMode",
    "ProjectSelection",
    "RepositoryRegistry",
    "RepositoryTarget",
    "SyncEvent",
    "SyncEventKind",
    "SyncOperation",
    "SyncOutcome",
    "SyncResult",
    "SyncSummary",
    "extract_project_name",
]
