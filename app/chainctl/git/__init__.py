"""Local git mirrors: layout, branch enumeration and parallel sync.

This module exports the classes used to maintain and query the mirrors.
"""

from chainctl.git.branches import BranchEnumerator
from chainctl.git.layout import MirrorLayout
from chainctl.git.mirrors import MAX_CONCURRENCY, MirrorSyncService, iter_events

__all__ = [
    "MAX_CONCURRENCY",
    "BranchEnumerator",
    "MirrorLayout",
    "MirrorSyncService",
    "iter_events",
]
