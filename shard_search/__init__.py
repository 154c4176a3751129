"""
Parallel Shard Search

Exact-match byte pattern search split across a fixed group of workers:
overlap-aware partitioning, broadcast and variable scatter of the inputs,
independent local scans, and a variable gather of the ordered offsets.
"""

__version__ = "0.1.0"

from .core.errors import (
    ShardSearchError,
    ConfigurationError,
    ResourceError,
    SourceReadError,
    CollectiveAbortedError,
)
from .core.plan import ShardPlan, partition
from .core.collector import GlobalResult
from .core.node import SearchNode
from .core.coordinator import SearchCoordinator
from .search.engine import SearchEngine
from .search.patterns import PatternMatcher

__all__ = [
    "ShardSearchError",
    "ConfigurationError",
    "ResourceError",
    "SourceReadError",
    "CollectiveAbortedError",
    "ShardPlan",
    "partition",
    "GlobalResult",
    "SearchNode",
    "SearchCoordinator",
    "SearchEngine",
    "PatternMatcher",
]
