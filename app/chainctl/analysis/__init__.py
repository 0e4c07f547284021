"""Known-entity analysis.

Sources scan chain files or repository mirrors; ChainAnalyzer caches
their combined result until it is invalidated.
"""

from chainctl.analysis.analyzer import ChainAnalyzer
from chainctl.analysis.base import CompositeSource, KnownEntitySource
from chainctl.analysis.directory import DirectoryChainSource
from chainctl.analysis.git import GitMirrorSource

__all__ = [
    "ChainAnalyzer",
    "CompositeSource",
    "DirectoryChainSource",
    "GitMirrorSource",
    "KnownEntitySource",
]
